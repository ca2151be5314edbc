# uploads/uploaders/image.py

import mimetypes

from django.conf import settings

from uploads.uploaders.uploader import Uploader


def is_image(file) -> bool:
    # by name only: cached and stored handles carry no client content type
    content_type = mimetypes.guess_type(file.name)[0]
    return bool(content_type) and content_type.startswith("image/")


def fits_preview(file) -> bool:
    return file.size <= getattr(settings, "UPLOADS_PREVIEW_MAX_SIZE", 5 * 1024 * 1024)


def configure_thumb(thumb):
    thumb.version("small")


class ImageUploader(Uploader):
    """
    Uploader used by the uploads API.

    - thumb: images only; carries a nested `small` version (thumb_small_*)
    - preview: any file up to UPLOADS_PREVIEW_MAX_SIZE bytes
    """


ImageUploader.version("thumb", {"if": is_image}, configure=configure_thumb)
ImageUploader.version("preview", {"if": fits_preview})
