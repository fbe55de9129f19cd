"""
Blob Store Factory

Selects the blob backend from BLOB_BACKEND ("gcs" or "local")
"""
import logging
from typing import Optional

from app.config import Settings, settings
from .storage_base import BlobStore

logger = logging.getLogger("uvicorn.error")


def get_blob_store(name: Optional[str] = None, config: Optional[Settings] = None) -> BlobStore:
    """
    Build the configured blob store

    Parameters:
    - name: Backend name, defaults to config.blob_backend
    - config: Settings to build from, defaults to app.config.settings

    Raises:
    - ValueError: Unknown backend name
    """
    config = config or settings
    name = (name or config.blob_backend).lower()
    if name == "gcs":
        from .storage_gcs import GCSBlobStore

        store = GCSBlobStore(config.gcs_bucket_name, config.gcs_credentials_raw)
    elif name == "local":
        from .storage_local import LocalBlobStore

        store = LocalBlobStore(config.local_blob_dir, config.local_blob_base_url)
    else:
        raise ValueError(f"Unknown blob backend: {name}")

    logger.info("[storage] Using %s", store.name)
    return store
