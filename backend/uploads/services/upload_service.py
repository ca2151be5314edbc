import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from django.db import transaction

from uploads.exceptions import UploadMissingError, UploadValidationError
from uploads.models import Upload
from uploads.uploaders.base import parse_cache_name
from uploads.uploaders.image import ImageUploader

logger = logging.getLogger("uploads.services.upload_service")


class UploadManager:
    """
    Handles caching, storing, retrieval, removal and version regeneration
    of uploads. All version work is delegated to the uploader class.
    """

    def __init__(self, uploader_class=ImageUploader, mounted_as: str = "file"):
        self.uploader_class = uploader_class
        self.mounted_as = mounted_as

    def cache_file(self, file_obj: Any) -> Tuple[str, Any]:
        """
        Cache an upload (and its applicable versions) without persisting it.
        Returns: (cache_name, uploader); pass cache_name to upload_file later.
        """
        uploader = self.uploader_class(None, self.mounted_as)
        uploader.cache(file_obj)
        logger.info("cache_file: %s → %s", file_obj.name, uploader.cache_name)
        return uploader.cache_name, uploader

    def upload_file(
        self,
        file_obj: Optional[Any] = None,
        cache_name: Optional[str] = None,
    ) -> Tuple[Upload, Any]:
        """
        - Create the Upload row
        - Store the new file, or a previously cached one, with its versions
        Returns: (Upload instance, uploader)
        """
        if (file_obj is None) == (cache_name is None):
            raise UploadValidationError("Provide exactly one of file or cache_name")
        if cache_name is not None:
            self._check_cached(cache_name)

        with transaction.atomic():
            upload = Upload.objects.create(original_filename="")
            uploader = self.uploader_class(upload, self.mounted_as)
            if file_obj is not None:
                logger.info("upload_file: storing %s for id=%s", file_obj.name, upload.id)
                uploader.store(file_obj)
                content_type = getattr(file_obj, "content_type", None)
            else:
                logger.info("upload_file: storing cached %s for id=%s", cache_name, upload.id)
                uploader.retrieve_from_cache(cache_name)
                uploader.store()
                content_type = None

            upload.identifier = uploader.identifier
            upload.original_filename = uploader.original_filename
            upload.content_type = content_type or uploader.file.content_type or ""
            upload.size = uploader.file.size
            upload.save()

        logger.info(
            "Stored upload id=%s with versions %s",
            upload.id, sorted(uploader.versions),
        )
        return upload, uploader

    def _check_cached(self, cache_name: str) -> None:
        cache_id, original_filename = parse_cache_name(cache_name)
        probe = self.uploader_class(None, self.mounted_as)
        path = "/".join([probe.cache_dir, cache_id, original_filename])
        if not probe.storage.exists(path):
            logger.warning("upload_file: cached file not found %s", cache_name)
            raise UploadValidationError(f"Cached file not found: {cache_name}")

    def get_upload(self, upload_id: Any) -> Upload:
        try:
            upload = Upload.objects.get(pk=upload_id)
            logger.debug("get_upload found id=%s", upload_id)
            return upload
        except Upload.DoesNotExist:
            logger.warning("get_upload: Upload not found id=%s", upload_id)
            raise UploadMissingError(f"Upload not found: {upload_id}")

    def uploader_for(self, upload: Upload):
        uploader = self.uploader_class(upload, self.mounted_as)
        if upload.identifier:
            uploader.retrieve_from_store(upload.identifier)
        return uploader

    def version_urls(self, uploader) -> Dict[str, Any]:
        """
        Nested url map, e.g.
            {"url": ".../a.png", "versions": {"thumb": {"url": ..., "versions": {...}}}}
        Excluded versions are absent.
        """
        return {
            "url": uploader.url(),
            "versions": {
                name: self.version_urls(version)
                for name, version in uploader.versions.items()
            },
        }

    def version_url(self, upload: Upload, names: Sequence[str]) -> Optional[str]:
        return self.uploader_for(upload).url(*names)

    def delete_upload(self, upload_id: Any) -> None:
        """
        Remove the stored file and every version file, then the row.
        """
        logger.info("delete_upload called for id=%s", upload_id)
        with transaction.atomic():
            upload = self.get_upload(upload_id)
            self.uploader_for(upload).remove()
            upload.delete()

    def recreate_versions(self, upload_id: Any):
        upload = self.get_upload(upload_id)
        uploader = self.uploader_for(upload)
        logger.info("Recreating versions for id=%s", upload_id)
        uploader.recreate_versions()
        return upload, uploader
