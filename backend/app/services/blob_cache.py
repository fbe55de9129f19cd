"""
Blob Cache

Thin layer over a BlobStore. Store failures of any kind reach callers as
InfrastructureError so services only deal with one error type for storage.
"""
import logging

from app.core.errors import InfrastructureError
from .storage_base import BlobStore

logger = logging.getLogger("uvicorn.error")

JSON_CONTENT_TYPE = "application/json"
MP3_CONTENT_TYPE = "audio/mpeg"


class BlobCache:
    def __init__(self, store: BlobStore):
        self.store = store

    async def exists(self, path: str) -> bool:
        try:
            return await self.store.exists(path)
        except InfrastructureError:
            raise
        except Exception as e:
            raise InfrastructureError(f"{self.store.name}: exists({path}) failed: {e}") from e

    async def read(self, path: str) -> bytes:
        try:
            return await self.store.download(path)
        except InfrastructureError:
            raise
        except Exception as e:
            raise InfrastructureError(f"{self.store.name}: read({path}) failed: {e}") from e

    async def write(self, path: str, data: bytes, content_type: str) -> None:
        """Last writer wins; concurrent writers are expected to write identical content."""
        try:
            await self.store.upload(path, data, content_type)
        except InfrastructureError:
            raise
        except Exception as e:
            raise InfrastructureError(f"{self.store.name}: write({path}) failed: {e}") from e
        logger.debug("[cache] wrote %s (%d bytes, %s)", path, len(data), content_type)

    def public_url(self, path: str) -> str:
        return self.store.public_url(path)
