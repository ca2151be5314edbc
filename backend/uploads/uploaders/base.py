# uploads/uploaders/base.py

import logging
import mimetypes
import os
import random
import re
from typing import Any, Optional

from django.conf import settings
from django.core.files import File as DjangoFile
from django.core.files.storage import default_storage
from django.utils import timezone

from uploads.exceptions import InvalidCacheNameError, UploaderError
from uploads.uploaders.callbacks import Callbacks

logger = logging.getLogger(__name__)

CACHE_ID_RE = re.compile(r"\d{8}-\d{4}-\d+-\d{4}")
ORIGINAL_FILENAME_RE = re.compile(r"[\w.\-+]+")


def generate_cache_id() -> str:
    """YYYYMMDD-HHMM-<pid>-<4 random digits>"""
    return "%s-%d-%04d" % (
        timezone.now().strftime("%Y%m%d-%H%M"),
        os.getpid(),
        random.randint(0, 9999),
    )


def parse_cache_name(cache_name):
    """Split "<cache_id>/<original_filename>", rejecting anything else."""
    cache_id, sep, original_filename = str(cache_name).partition("/")
    if (
        not sep
        or not CACHE_ID_RE.fullmatch(cache_id)
        or not ORIGINAL_FILENAME_RE.fullmatch(original_filename)
        or not original_filename.strip(".")
    ):
        raise InvalidCacheNameError(f"Invalid cache name: {cache_name!r}")
    return cache_id, original_filename


class StoredFile:
    """A file held in a Django storage, addressed by its storage name."""

    def __init__(self, storage, name: str):
        self.storage = storage
        self.name = name

    def __repr__(self):
        return f"<StoredFile {self.name}>"

    def __eq__(self, other):
        return (
            isinstance(other, StoredFile)
            and other.storage is self.storage
            and other.name == self.name
        )

    def __hash__(self):
        return hash((id(self.storage), self.name))

    @property
    def size(self) -> int:
        return self.storage.size(self.name)

    @property
    def content_type(self) -> Optional[str]:
        return mimetypes.guess_type(self.name)[0]

    @property
    def url(self) -> str:
        return self.storage.url(self.name)

    def exists(self) -> bool:
        return self.storage.exists(self.name)

    def open(self, mode="rb"):
        return self.storage.open(self.name, mode)


class BaseUploader(Callbacks):
    """
    Primitive lifecycle of one uploaded file on top of a Django storage:
    cache (temporary copy), store (permanent copy), retrieve either of
    them again, and remove.

    Every primitive runs inside `with_callbacks`, so after-hooks fire only
    once the action itself succeeded.
    """

    storage = default_storage

    def __init__(self, model=None, mounted_as=None):
        self.model = model
        self.mounted_as = mounted_as
        self.file: Optional[StoredFile] = None
        self.original_filename: Optional[str] = None
        self.identifier: Optional[str] = None
        self._cache_id: Optional[str] = None

    # configuration

    @property
    def cache_dir(self) -> str:
        return getattr(settings, "UPLOADS_CACHE_DIR", "uploads/tmp")

    @property
    def base_store_dir(self) -> str:
        return getattr(settings, "UPLOADS_STORE_DIR", "uploads")

    def store_dir(self) -> str:
        parts = [self.base_store_dir]
        if self.model is not None:
            meta = getattr(self.model, "_meta", None)
            parts.append(meta.model_name if meta else type(self.model).__name__.lower())
            pk = getattr(self.model, "pk", None)
            if pk is not None:
                parts.append(str(pk))
        if self.mounted_as:
            parts.append(str(self.mounted_as))
        return "/".join(parts)

    # filenames

    @property
    def filename(self) -> Optional[str]:
        return self.original_filename

    def full_filename(self, for_file):
        return for_file

    def full_original_filename(self):
        return self.original_filename

    def cache_path(self) -> str:
        return "/".join([self.cache_dir, self.cache_id, self.full_original_filename()])

    def store_path(self, for_file) -> str:
        return "/".join([self.store_dir(), self.full_filename(for_file)])

    # cache session

    @property
    def cache_id(self) -> Optional[str]:
        return self._cache_id

    @cache_id.setter
    def cache_id(self, value):
        if value is not None and not CACHE_ID_RE.fullmatch(value):
            raise InvalidCacheNameError(f"Invalid cache id: {value!r}")
        self._cache_id = value

    @property
    def cache_name(self) -> Optional[str]:
        if self.cache_id and self.original_filename:
            return f"{self.cache_id}/{self.original_filename}"
        return None

    @property
    def cached(self) -> bool:
        return self.cache_id is not None and self.file is not None

    @property
    def blank(self) -> bool:
        return self.file is None

    # lifecycle

    def cache(self, new_file):
        if new_file is None:
            raise UploaderError("Cannot cache an empty file")
        with self.with_callbacks("cache", new_file):
            if not self.cache_id:
                self.cache_id = generate_cache_id()
            self.original_filename = self._valid_name(new_file)
            self.file = self._write(self.cache_path(), new_file)
            logger.debug("Cached %s as %s", new_file, self.file.name)

    def retrieve_from_cache(self, cache_name):
        with self.with_callbacks("retrieve_from_cache", cache_name):
            cache_id, original_filename = parse_cache_name(cache_name)
            self.cache_id = cache_id
            self.original_filename = original_filename
            self.file = StoredFile(self.storage, self.cache_path())

    def store(self, new_file=None):
        if new_file is not None:
            self.cache(new_file)
        if self.file is None:
            return
        with self.with_callbacks("store", new_file):
            cached = self.file
            target = self.store_path(self.filename)
            if cached.name == target:
                stored = cached
            else:
                stored = self._write(target, cached)
                if cached.name.startswith(self.cache_dir + "/"):
                    self.storage.delete(cached.name)
            self.file = stored
            self.identifier = self.filename
            self.cache_id = None
            logger.debug("Stored %s", stored.name)

    def retrieve_from_store(self, identifier):
        with self.with_callbacks("retrieve_from_store", identifier):
            self.locate_stored(identifier)

    def locate_stored(self, identifier):
        """Point at the stored file for `identifier` without running hooks."""
        self.original_filename = identifier
        self.identifier = identifier
        self.file = StoredFile(self.storage, self.store_path(identifier))

    def remove(self):
        with self.with_callbacks("remove"):
            if self.file is not None and self.file.exists():
                self.storage.delete(self.file.name)
                logger.debug("Removed %s", self.file.name)
            self.file = None

    def url(self) -> Optional[str]:
        if self.file is None:
            return None
        return self.file.url

    # helpers

    def _valid_name(self, new_file) -> str:
        name = os.path.basename(getattr(new_file, "name", None) or "")
        if not name:
            raise UploaderError(f"Cannot determine a filename for {new_file!r}")
        return self.storage.get_valid_name(name)

    def _write(self, path: str, source: Any) -> StoredFile:
        if self.storage.exists(path):
            self.storage.delete(path)
        if isinstance(source, StoredFile):
            with source.open() as content:
                saved = self.storage.save(path, content)
        else:
            # plain File: the same upload is reread for every version
            saved = self.storage.save(path, DjangoFile(source, name=os.path.basename(path)))
        return StoredFile(self.storage, saved)
