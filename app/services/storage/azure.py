"""
Azure Blob Storage Implementation

Production object storage using the official Azure Storage SDK.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - AZURE_STORAGE_CONNECTION_STRING must be set in environment
    - STORAGE_CONTAINER must exist and allow public blob reads

The SDK client is synchronous; calls run in a worker thread so the
event loop keeps serving requests during uploads.

Author: Spice Heritage Engineering
Version: 1.0.0
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import unquote, urlparse

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from app.core.config import get_settings
from app.services.storage.base import (
    DEFAULT_CONTENT_TYPE,
    BaseStorageService,
    StorageError,
)

logger = logging.getLogger(__name__)


class AzureBlobStorageService(BaseStorageService):
    """
    Azure Blob Storage object store.

    Configuration:
        Requires AZURE_STORAGE_CONNECTION_STRING environment variable.
    """

    def __init__(self, service_client: Optional[BlobServiceClient] = None):
        """
        Raises:
            ValueError: If AZURE_STORAGE_CONNECTION_STRING is not configured
        """
        settings = get_settings()

        if service_client is None:
            if not settings.azure_storage_connection_string:
                raise ValueError(
                    "AZURE_STORAGE_CONNECTION_STRING is required for production mode. "
                    "Set it in your .env file or environment variables."
                )
            service_client = BlobServiceClient.from_connection_string(
                settings.azure_storage_connection_string
            )

        self._client = service_client
        self._container = settings.storage_container

        logger.info(f"AzureBlobStorageService initialized (container={self._container})")

    @property
    def provider_name(self) -> str:
        return "azure"

    def _blob_name(self, url_or_path: str) -> str:
        """Turn a blob URL (or a plain object path) into the blob name."""
        if "://" not in url_or_path:
            return url_or_path.lstrip("/")
        path = unquote(urlparse(url_or_path).path).lstrip("/")
        container_prefix = f"{self._container}/"
        if not path.startswith(container_prefix):
            raise StorageError(f"URL is not in container '{self._container}': {url_or_path}")
        return path[len(container_prefix):]

    def _upload_sync(self, path: str, data: bytes, content_type: str) -> str:
        blob_client = self._client.get_blob_client(self._container, path)
        blob_client.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type),
        )
        return blob_client.url

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> str:
        logger.info(f"Azure: Uploading {path} ({len(data)} bytes)")
        try:
            return await asyncio.to_thread(self._upload_sync, path, data, content_type)
        except AzureError as e:
            logger.error(f"Azure upload of {path} failed: {e}")
            raise StorageError(str(e)) from e

    async def delete(self, url_or_path: str) -> None:
        blob_name = self._blob_name(url_or_path)
        blob_client = self._client.get_blob_client(self._container, blob_name)
        try:
            await asyncio.to_thread(blob_client.delete_blob)
        except ResourceNotFoundError as e:
            raise StorageError(f"Object not found: {blob_name}") from e
        except AzureError as e:
            logger.error(f"Azure delete of {blob_name} failed: {e}")
            raise StorageError(str(e)) from e
        logger.info(f"Azure: Deleted {blob_name}")

    async def health_check(self) -> bool:
        container = self._client.get_container_client(self._container)
        try:
            return await asyncio.to_thread(container.exists)
        except AzureError as e:
            logger.error(f"Azure health check failed: {e}")
            return False
