"""
Storage Provider Interface and Implementations
Uploaded images are kept on local disk and served from /uploads
"""
from abc import ABC, abstractmethod
from typing import Optional
import logging
import os
import random
import time
from pathlib import Path

logger = logging.getLogger(__name__)

# Upload folders, one per kind of owner
UPLOAD_KINDS = ("users", "blogs", "communities", "products")


class StorageProvider(ABC):
    """Abstract base class for storage providers"""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """
        Store data and return the storage key

        Args:
            key: Storage key/path
            data: Data bytes to store
            content_type: MIME type
        """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Retrieve data by key, None if missing"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete data by key; True if something was removed"""

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Public URL for a stored object"""


class LocalDiskStorageProvider(StorageProvider):
    """Local filesystem storage rooted at UPLOADS_DIR"""

    def __init__(self, base_path: Optional[str] = None, public_base_url: str = ""):
        """
        Args:
            base_path: Base directory for uploads (default: ./uploads)
            public_base_url: API_URL prefix for generated links; relative links when empty
        """
        self.base_path = Path(base_path or "./uploads")
        self.public_base_url = public_base_url.rstrip("/")
        self.base_path.mkdir(parents=True, exist_ok=True)
        for kind in UPLOAD_KINDS:
            (self.base_path / kind).mkdir(exist_ok=True)

        logger.info(f"LocalDiskStorageProvider initialized at {self.base_path}")

    def _path_for(self, key: str) -> Path:
        safe_key = key.lstrip('/').replace('..', '')
        return self.base_path / safe_key

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        file_path = self._path_for(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)

        logger.debug(f"Stored {len(data)} bytes ({content_type}) to {file_path}")
        return file_path.relative_to(self.base_path).as_posix()

    def get(self, key: str) -> Optional[bytes]:
        file_path = self._path_for(key)
        if not file_path.exists():
            return None
        return file_path.read_bytes()

    def delete(self, key: str) -> bool:
        file_path = self._path_for(key)
        if not file_path.exists():
            return False

        try:
            file_path.unlink()
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

        logger.debug(f"Deleted {file_path}")
        return True

    def get_url(self, key: str) -> str:
        path = f"/uploads/{key.lstrip('/')}"
        return f"{self.public_base_url}{path}" if self.public_base_url else path

    def generate_key(self, kind: str, original_filename: Optional[str]) -> str:
        """
        Generate a unique key: <kind>/<epoch ms>-<random><ext>
        """
        ext = os.path.splitext(original_filename or "")[1].lower()
        return f"{kind}/{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"

    def key_from_url(self, kind: str, url: Optional[str]) -> Optional[str]:
        """
        Storage key for a URL this provider issued, None for anything else

        Hosted URLs (CDNs, social avatars) are never touched.
        """
        if not url:
            return None
        marker = f"/uploads/{kind}/"
        if marker not in url:
            return None
        filename = url.split(marker, 1)[1].split("?", 1)[0]
        if not filename or "/" in filename:
            return None
        return f"{kind}/{filename}"


# Singleton instance
_storage_provider: Optional[LocalDiskStorageProvider] = None


def get_storage_provider() -> LocalDiskStorageProvider:
    """Get or create the storage provider singleton"""
    global _storage_provider

    if _storage_provider is None:
        from ..config import config
        _storage_provider = LocalDiskStorageProvider(
            base_path=config.UPLOADS_DIR,
            public_base_url=config.API_URL,
        )

    return _storage_provider


def set_storage_provider(provider: Optional[LocalDiskStorageProvider]) -> None:
    global _storage_provider
    _storage_provider = provider


def delete_local_upload(kind: str, url: Optional[str]) -> bool:
    """Remove a previously uploaded file if the URL points into /uploads/<kind>/"""
    provider = get_storage_provider()
    key = provider.key_from_url(kind, url)
    if key is None:
        return False
    return provider.delete(key)
