import uuid
from unittest.mock import patch

import pytest
from django.core.files.storage import default_storage

from uploads.exceptions import (
    InvalidCacheNameError,
    UnknownVersionError,
    UploadMissingError,
    UploadValidationError,
)
from uploads.models import Upload
from uploads.services.upload_service import UploadManager
from uploads.tests.factories import UploadFactory


@pytest.fixture
def upload_manager():
    """Create an UploadManager instance for testing"""
    return UploadManager()


def stored_names(upload):
    _, files = default_storage.listdir(f"uploads/upload/{upload.pk}/file")
    return sorted(files)


@pytest.mark.django_db
class TestUploadFile:
    def test_upload_image_creates_row_and_versions(self, upload_manager, make_file):
        # Act
        upload, uploader = upload_manager.upload_file(make_file(name="photo.png", size=50))

        # Assert
        upload.refresh_from_db()
        assert upload.identifier == "photo.png"
        assert upload.original_filename == "photo.png"
        assert upload.content_type == "image/png"
        assert upload.size == 50
        assert stored_names(upload) == [
            "photo.png",
            "preview_photo.png",
            "thumb_photo.png",
            "thumb_small_photo.png",
        ]

    def test_upload_text_file_skips_thumb(self, upload_manager, make_file):
        upload, uploader = upload_manager.upload_file(
            make_file(name="notes.txt", size=50, content_type="text/plain")
        )

        assert "thumb" not in uploader.versions
        assert stored_names(upload) == ["notes.txt", "preview_notes.txt"]

    def test_upload_requires_exactly_one_source(self, upload_manager, make_file):
        with pytest.raises(UploadValidationError):
            upload_manager.upload_file()
        with pytest.raises(UploadValidationError):
            upload_manager.upload_file(make_file(), cache_name="x/y.png")
        assert Upload.objects.count() == 0

    def test_upload_from_cache(self, upload_manager, make_file):
        # Arrange
        cache_name, _ = upload_manager.cache_file(make_file(name="photo.png", size=50))

        # Act
        upload, uploader = upload_manager.upload_file(cache_name=cache_name)

        # Assert
        assert upload.identifier == "photo.png"
        assert upload.content_type == "image/png"
        assert stored_names(upload) == [
            "photo.png",
            "preview_photo.png",
            "thumb_photo.png",
            "thumb_small_photo.png",
        ]

    def test_upload_from_cache_with_generic_content_type(self, upload_manager, make_file):
        # Arrange
        cache_name, cached = upload_manager.cache_file(
            make_file(name="photo.png", size=50, content_type="application/octet-stream")
        )
        assert set(cached.versions) == {"thumb", "preview"}

        # Act
        upload, uploader = upload_manager.upload_file(cache_name=cache_name)

        # Assert
        assert upload.content_type == "image/png"
        assert stored_names(upload) == [
            "photo.png",
            "preview_photo.png",
            "thumb_photo.png",
            "thumb_small_photo.png",
        ]
        assert default_storage.listdir(f"uploads/tmp/{cached.cache_id}")[1] == []

    def test_upload_from_missing_cache_rolls_back(self, upload_manager):
        with pytest.raises(UploadValidationError):
            upload_manager.upload_file(cache_name="20261018-2100-1-0001/photo.png")

        assert Upload.objects.count() == 0

    def test_upload_from_malformed_cache_name(self, upload_manager):
        with pytest.raises(InvalidCacheNameError):
            upload_manager.upload_file(cache_name="nope")

        assert Upload.objects.count() == 0

    def test_storage_failure_rolls_back_row(self, upload_manager, make_file):
        with patch(
            "uploads.uploaders.base.BaseUploader._write", side_effect=OSError("disk full")
        ):
            with pytest.raises(OSError):
                upload_manager.upload_file(make_file())

        assert Upload.objects.count() == 0


class TestCacheFile:
    def test_cache_file_returns_cache_name(self, upload_manager, make_file):
        cache_name, uploader = upload_manager.cache_file(make_file(name="photo.png"))

        assert cache_name == f"{uploader.cache_id}/photo.png"
        assert default_storage.exists(f"uploads/tmp/{cache_name}")
        assert default_storage.exists(f"uploads/tmp/{uploader.cache_id}/thumb_photo.png")


@pytest.mark.django_db
class TestLookups:
    def test_get_upload(self, upload_manager):
        upload = UploadFactory()

        assert upload_manager.get_upload(upload.id) == upload

    def test_get_upload_missing(self, upload_manager):
        with pytest.raises(UploadMissingError):
            upload_manager.get_upload(uuid.uuid4())

    def test_uploader_for_unstored_upload_is_blank(self, upload_manager):
        upload = UploadFactory(identifier="")

        assert upload_manager.uploader_for(upload).blank

    def test_version_urls(self, upload_manager, make_file):
        # Arrange
        upload, _ = upload_manager.upload_file(make_file(name="photo.png", size=50))
        base = f"/media/uploads/upload/{upload.pk}/file"

        # Act
        urls = upload_manager.version_urls(upload_manager.uploader_for(upload))

        # Assert
        assert urls == {
            "url": f"{base}/photo.png",
            "versions": {
                "thumb": {
                    "url": f"{base}/thumb_photo.png",
                    "versions": {
                        "small": {"url": f"{base}/thumb_small_photo.png", "versions": {}},
                    },
                },
                "preview": {"url": f"{base}/preview_photo.png", "versions": {}},
            },
        }

    def test_version_url(self, upload_manager, make_file):
        upload, _ = upload_manager.upload_file(make_file(name="photo.png", size=50))

        url = upload_manager.version_url(upload, ["thumb", "small"])

        assert url == f"/media/uploads/upload/{upload.pk}/file/thumb_small_photo.png"

    def test_version_url_of_excluded_version(self, upload_manager, make_file):
        upload, _ = upload_manager.upload_file(
            make_file(name="notes.txt", content_type="text/plain")
        )

        with pytest.raises(UnknownVersionError):
            upload_manager.version_url(upload, ["thumb"])


@pytest.mark.django_db
class TestDeleteAndRecreate:
    def test_delete_upload_removes_files_and_row(self, upload_manager, make_file):
        upload, _ = upload_manager.upload_file(make_file(name="photo.png", size=50))

        upload_manager.delete_upload(upload.id)

        assert not Upload.objects.filter(pk=upload.pk).exists()
        assert stored_names(upload) == []

    def test_delete_upload_removes_versions_excluded_since_storing(
        self, upload_manager, make_file, settings
    ):
        # Arrange
        upload, _ = upload_manager.upload_file(make_file(name="photo.png", size=50))
        settings.UPLOADS_PREVIEW_MAX_SIZE = 10

        # Act
        upload_manager.delete_upload(upload.id)

        # Assert
        assert stored_names(upload) == []

    def test_delete_missing_upload(self, upload_manager):
        with pytest.raises(UploadMissingError):
            upload_manager.delete_upload(uuid.uuid4())

    def test_recreate_versions_restores_version_files(self, upload_manager, make_file):
        # Arrange
        upload, _ = upload_manager.upload_file(make_file(name="photo.png", size=50))
        directory = f"uploads/upload/{upload.pk}/file"
        default_storage.delete(f"{directory}/thumb_photo.png")
        default_storage.delete(f"{directory}/preview_photo.png")

        # Act
        upload_manager.recreate_versions(upload.id)

        # Assert
        assert stored_names(upload) == [
            "photo.png",
            "preview_photo.png",
            "thumb_photo.png",
            "thumb_small_photo.png",
        ]
