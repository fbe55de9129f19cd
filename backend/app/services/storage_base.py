"""
Blob Store Abstract Interface

Provides a unified interface for object stores (Google Cloud Storage / local filesystem).
"""
from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Blob Store Abstract Base Class"""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check whether an object exists at path"""
        pass

    @abstractmethod
    async def download(self, path: str) -> bytes:
        """Read the full object at path"""
        pass

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        """
        Write data at path, replacing any existing object

        Readers must never observe a partially written object.
        """
        pass

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Public URL for the object at path"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., "Google Cloud Storage")"""
        pass
