# uploads/tests/conftest.py

import pytest
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from uploads.uploaders.uploader import Uploader


class Owner:
    """Stand-in for a model instance owning an uploader."""

    def __init__(self, pk=7):
        self.pk = pk


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Route default_storage into a per-test directory."""
    settings.MEDIA_ROOT = str(tmp_path / "media")
    return settings.MEDIA_ROOT


@pytest.fixture
def storage(tmp_path):
    return FileSystemStorage(location=str(tmp_path / "storage"), base_url="/media/")


@pytest.fixture
def uploader_class(storage):
    """A fresh, unfrozen uploader class per test, writing to `storage`."""

    class PhotoUploader(Uploader):
        pass

    PhotoUploader.storage = storage
    return PhotoUploader


@pytest.fixture
def owner():
    return Owner()


@pytest.fixture
def make_file():
    def _make_file(name="photo.png", size=50, content_type="image/png", content=None):
        if content is None:
            content = b"x" * size
        return SimpleUploadedFile(name=name, content=content, content_type=content_type)

    return _make_file


@pytest.fixture
def api_client():
    return APIClient()
