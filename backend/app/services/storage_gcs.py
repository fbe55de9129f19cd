"""
Google Cloud Storage Blob Store

The storage SDK is synchronous, so every call runs in the event loop's default executor.
"""
import asyncio
import json
from typing import Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import storage
from google.oauth2 import service_account

from app.core.errors import InfrastructureError
from .storage_base import BlobStore


class GCSBlobStore(BlobStore):
    """Blob store backed by a single GCS bucket"""

    def __init__(self, bucket_name: Optional[str], credentials_raw: Optional[str] = None):
        self.bucket_name = bucket_name
        self.credentials_raw = credentials_raw
        self._bucket = None

    @property
    def name(self) -> str:
        return "Google Cloud Storage"

    def _get_bucket(self):
        """Create the client on first use (credentials are only needed once we touch GCS)"""
        if self._bucket is not None:
            return self._bucket
        if not self.bucket_name:
            raise InfrastructureError("GCS_BUCKET_NAME is not set")

        if self.credentials_raw:
            try:
                info = json.loads(self.credentials_raw)
            except ValueError as e:
                raise InfrastructureError(f"GCS credentials are not valid JSON: {e}") from e
            credentials = service_account.Credentials.from_service_account_info(info)
            client = storage.Client(credentials=credentials, project=info.get("project_id"))
        else:
            # Application default credentials (e.g. running on GCP)
            client = storage.Client()

        self._bucket = client.bucket(self.bucket_name)
        return self._bucket

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, fn, *args)
        except GoogleAPIError as e:
            raise InfrastructureError(f"{self.name}: {e}") from e

    async def exists(self, path: str) -> bool:
        def _exists() -> bool:
            return self._get_bucket().blob(path).exists()
        return await self._run(_exists)

    async def download(self, path: str) -> bytes:
        def _download() -> bytes:
            return self._get_bucket().blob(path).download_as_bytes()
        return await self._run(_download)

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        # GCS object writes are atomic: readers see the old or the new object, never a mix
        def _upload() -> None:
            self._get_bucket().blob(path).upload_from_string(data, content_type=content_type)
        await self._run(_upload)

    def public_url(self, path: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket_name}/{path}"
