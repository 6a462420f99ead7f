"""
Local Filesystem Storage

Development implementation of object storage. Objects are written below
MEDIA_DIRECTORY and served by the app under MEDIA_URL, so uploaded menu
and gallery images render exactly as they would from the hosted bucket.

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import asyncio
import logging
from pathlib import Path
from typing import Union

from app.services.storage.base import (
    DEFAULT_CONTENT_TYPE,
    BaseStorageService,
    StorageError,
)

logger = logging.getLogger(__name__)


class LocalStorageService(BaseStorageService):
    """
    Filesystem-backed object storage.

    Example:
        >>> storage = LocalStorageService("data/media", "/media")
        >>> await storage.upload("menu/1717000000000_naan.jpg", b"...")
        '/media/menu/1717000000000_naan.jpg'
    """

    def __init__(self, root: Union[str, Path], base_url: str = "/media"):
        self.root = Path(root).resolve()
        self.base_url = "/" + base_url.strip("/")
        self.root.mkdir(parents=True, exist_ok=True)

        logger.info(f"LocalStorageService initialized (root={self.root})")

    @property
    def provider_name(self) -> str:
        return "local"

    def _resolve(self, url_or_path: str) -> Path:
        relative = url_or_path
        prefix = self.base_url + "/"
        if "://" in relative:
            relative = "/" + relative.split("://", 1)[1].split("/", 1)[-1]
        if relative.startswith(prefix):
            relative = relative[len(prefix):]
        target = (self.root / relative.lstrip("/")).resolve()
        if self.root not in target.parents:
            raise StorageError(f"Object path escapes the media root: {url_or_path}")
        return target

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_bytes, data)
        except OSError as e:
            raise StorageError(f"Upload of {path} failed: {e}") from e

        url = f"{self.base_url}/{target.relative_to(self.root).as_posix()}"
        logger.info(f"Stored {len(data)} bytes at {url} ({content_type})")
        return url

    async def delete(self, url_or_path: str) -> None:
        target = self._resolve(url_or_path)
        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError as e:
            raise StorageError(f"Object not found: {url_or_path}") from e
        except OSError as e:
            raise StorageError(f"Delete of {url_or_path} failed: {e}") from e
        logger.info(f"Deleted {url_or_path}")

    async def health_check(self) -> bool:
        return self.root.is_dir()
