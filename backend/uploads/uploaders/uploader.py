# uploads/uploaders/uploader.py

from uploads.uploaders.base import BaseUploader
from uploads.uploaders.versions import Versions


class Uploader(Versions, BaseUploader):
    """
    Uploader with versions. Subclass it, then register versions on the
    subclass:

        class AvatarUploader(Uploader):
            pass

        AvatarUploader.version("thumb", {"if": is_image},
                               configure=lambda thumb: thumb.version("small"))

    The version tree of a class is frozen when the class is first
    instantiated.
    """

    def __init__(self, model=None, mounted_as=None, definition=None):
        super().__init__(model, mounted_as)
        type(self).definition.freeze()
        self.definition = definition or type(self).definition


Uploader.after("cache", "cache_versions")
Uploader.after("store", "store_versions")
Uploader.after("remove", "remove_versions")
Uploader.after("retrieve_from_cache", "retrieve_versions_from_cache")
Uploader.after("retrieve_from_store", "retrieve_versions_from_store")
