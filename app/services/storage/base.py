"""
Object Storage Abstract Base Class

Binary uploads (menu photos, gallery images) go to object storage. The
database record only keeps the retrieval URL. Objects are laid out as
`{folder}/{timestamp_ms}_{filename}`.

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import mimetypes
import time
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Optional


DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StorageError(Exception):
    """Raised when an upload or delete fails."""


def build_object_path(folder: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build the object path for an upload.

    Only the final component of `filename` is kept so client-supplied
    names cannot escape the folder.

    Example:
        >>> build_object_path("menu", "naan.jpg", 1717000000000)
        'menu/1717000000000_naan.jpg'
    """
    ts = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms
    name = PurePosixPath(filename.replace("\\", "/")).name or "upload.bin"
    return f"{folder.strip('/')}/{ts}_{name}"


def guess_content_type(filename: str, fallback: Optional[str] = None) -> str:
    ctype, _ = mimetypes.guess_type(filename)
    return ctype or fallback or DEFAULT_CONTENT_TYPE


class BaseStorageService(ABC):
    """Abstract base class for object storage services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g. "local", "azure")."""
        pass

    @abstractmethod
    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> str:
        """
        Store `data` at `path`, overwriting any existing object.

        Returns:
            str: Public retrieval URL of the stored object
        """
        pass

    @abstractmethod
    async def delete(self, url_or_path: str) -> None:
        """
        Delete an object given its retrieval URL or its object path.

        Raises:
            StorageError: If the object does not exist or cannot be removed
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the storage backend is reachable."""
        pass
