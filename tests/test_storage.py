import asyncio

import pytest
from azure.core.exceptions import ResourceNotFoundError

from app.services.storage import (
    AzureBlobStorageService,
    LocalStorageService,
    StorageError,
    build_object_path,
    guess_content_type,
)


def test_object_path_layout():
    assert build_object_path("menu", "naan.jpg", 1717000000000) == "menu/1717000000000_naan.jpg"
    assert build_object_path("/gallery/", "../../etc/passwd", 5) == "gallery/5_passwd"
    assert build_object_path("gallery", "C:\\photos\\hall.png", 5) == "gallery/5_hall.png"


def test_content_type_guess():
    assert guess_content_type("hall.png") == "image/png"
    assert guess_content_type("blob", "image/webp") == "image/webp"
    assert guess_content_type("blob") == "application/octet-stream"


def test_local_upload_and_delete(tmp_path):
    storage = LocalStorageService(tmp_path, "/media")

    url = asyncio.run(storage.upload("gallery/1_hall.png", b"png-bytes", "image/png"))
    assert url == "/media/gallery/1_hall.png"
    assert (tmp_path / "gallery" / "1_hall.png").read_bytes() == b"png-bytes"

    asyncio.run(storage.delete(url))
    assert not (tmp_path / "gallery" / "1_hall.png").exists()


def test_local_delete_accepts_absolute_url(tmp_path):
    storage = LocalStorageService(tmp_path, "/media")
    asyncio.run(storage.upload("menu/1_naan.jpg", b"x"))
    asyncio.run(storage.delete("http://testserver/media/menu/1_naan.jpg"))
    assert not (tmp_path / "menu" / "1_naan.jpg").exists()


def test_local_delete_missing_object_fails(tmp_path):
    storage = LocalStorageService(tmp_path, "/media")
    with pytest.raises(StorageError):
        asyncio.run(storage.delete("/media/menu/missing.jpg"))


def test_local_paths_cannot_escape_root(tmp_path):
    storage = LocalStorageService(tmp_path / "media", "/media")
    with pytest.raises(StorageError):
        asyncio.run(storage.upload("../outside.txt", b"x"))


class FakeBlobClient:
    def __init__(self, store, container, name):
        self.store = store
        self.name = name
        self.url = f"https://acct.blob.core.windows.net/{container}/{name}"

    def upload_blob(self, data, overwrite, content_settings):
        self.store[self.name] = (data, content_settings.content_type)

    def delete_blob(self):
        if self.name not in self.store:
            raise ResourceNotFoundError("missing")
        del self.store[self.name]


class FakeServiceClient:
    def __init__(self):
        self.store = {}

    def get_blob_client(self, container, name):
        return FakeBlobClient(self.store, container, name)


def test_azure_upload_and_delete_by_url(settings):
    service = FakeServiceClient()
    storage = AzureBlobStorageService(service_client=service)

    url = asyncio.run(storage.upload("menu/1_naan.jpg", b"jpeg", "image/jpeg"))
    assert url.endswith(f"/{settings.storage_container}/menu/1_naan.jpg")
    assert service.store["menu/1_naan.jpg"] == (b"jpeg", "image/jpeg")

    asyncio.run(storage.delete(url))
    assert service.store == {}


def test_azure_delete_missing_blob(settings):
    storage = AzureBlobStorageService(service_client=FakeServiceClient())
    with pytest.raises(StorageError):
        asyncio.run(storage.delete("menu/missing.jpg"))


def test_azure_rejects_foreign_container():
    storage = AzureBlobStorageService(service_client=FakeServiceClient())
    with pytest.raises(StorageError):
        asyncio.run(storage.delete("https://acct.blob.core.windows.net/other/menu/1.jpg"))
