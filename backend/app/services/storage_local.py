"""
Local Filesystem Blob Store

Development backend: objects live under a directory and are served by the app
at LOCAL_BLOB_BASE_URL (see main.py static mount).
"""
import asyncio
import os
import tempfile
from pathlib import Path

from app.core.errors import InfrastructureError
from .storage_base import BlobStore


class LocalBlobStore(BlobStore):
    """Blob store backed by a local directory"""

    def __init__(self, root_dir: str, base_url: str):
        self.root = Path(root_dir).resolve()
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "Local filesystem"

    def _resolve(self, path: str) -> Path:
        """Map an object path to a file under root, refusing anything that escapes it"""
        target = (self.root / path).resolve()
        if self.root not in target.parents:
            raise InfrastructureError(f"{self.name}: path escapes blob root: {path}")
        return target

    async def exists(self, path: str) -> bool:
        target = self._resolve(path)
        return await asyncio.get_running_loop().run_in_executor(None, target.is_file)

    async def download(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return await asyncio.get_running_loop().run_in_executor(None, target.read_bytes)
        except OSError as e:
            raise InfrastructureError(f"{self.name}: cannot read {path}: {e}") from e

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)

        def _write() -> None:
            # Write to a temp file in the same directory, then rename over the target
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=".tmp-", suffix=target.suffix)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_path, target)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise

        try:
            await asyncio.get_running_loop().run_in_executor(None, _write)
        except OSError as e:
            raise InfrastructureError(f"{self.name}: cannot write {path}: {e}") from e

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"
