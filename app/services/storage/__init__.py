"""
Storage Service Factory

Returns local-filesystem or Azure Blob storage based on ENV_MODE.

Usage:
    from app.services.storage import get_storage_service, build_object_path

    storage = get_storage_service()
    url = await storage.upload(build_object_path("gallery", upload.filename), data)

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.services.storage.base import (
    BaseStorageService,
    StorageError,
    build_object_path,
    guess_content_type,
)
from app.services.storage.local import LocalStorageService
from app.services.storage.azure import AzureBlobStorageService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_service() -> BaseStorageService:
    """Get the configured storage service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Storage Service: Using LocalStorageService (development mode)")
        return LocalStorageService(settings.media_directory, settings.media_url)
    else:
        logger.info(f"Storage Service: Using AzureBlobStorageService ({settings.env_mode.value} mode)")
        return AzureBlobStorageService()


def reset_storage_service() -> None:
    """Clear the cached service instance."""
    get_storage_service.cache_clear()


__all__ = [
    "get_storage_service",
    "reset_storage_service",
    "BaseStorageService",
    "StorageError",
    "build_object_path",
    "guess_content_type",
    "LocalStorageService",
    "AzureBlobStorageService",
]
