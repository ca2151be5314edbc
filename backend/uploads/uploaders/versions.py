# uploads/uploaders/versions.py

import enum
import logging
from typing import Any, Callable, Dict, List, Optional

from uploads.exceptions import DefinitionFrozenError, UnknownVersionError

logger = logging.getLogger(__name__)

VERSION_NAME_SEPARATOR = "_"


class VersionDefinition:
    """
    One node of an uploader's version tree.

    The root node belongs to an uploader class and has no name. Each child
    node shares the root's uploader class (and with it the hooks and storage
    configuration) but carries its own name chain and its own registry of
    nested versions and conditions.
    """

    def __init__(self, uploader_class, name: Optional[str] = None, name_chain=()):
        self.uploader_class = uploader_class
        self.name = name
        self.name_chain = tuple(name_chain)
        self._versions: Dict[str, "VersionDefinition"] = {}
        self._conditions: Dict[str, Callable[[Any], Any]] = {}
        self.frozen = False

    def __repr__(self):
        return f"<VersionDefinition {self.composite_name or '(root)'} of {self.uploader_class.__name__}>"

    def version(self, name, options=None, configure=None) -> "VersionDefinition":
        """
        Register (or re-customize) a named version below this node.

        - options: mapping; the "if" key holds a predicate called with the
          parent's candidate file.
        - configure: callable receiving the version's definition, e.g. to
          register nested versions on it.
        Repeated registration of a name only re-runs `configure`; the
        options of the first registration stay in force.
        """
        if self.frozen:
            raise DefinitionFrozenError(
                f"Cannot register version {name} on {self!r}: definition is frozen"
            )
        name = str(name)
        definition = self._versions.get(name)
        if definition is None:
            definition = VersionDefinition(
                self.uploader_class, name, self.name_chain + (name,)
            )
            self._versions[name] = definition
            condition = (options or {}).get("if")
            if condition is not None:
                self._conditions[name] = condition
            logger.debug("Registered version %s", definition.composite_name)
        if configure is not None:
            configure(definition)
        return definition

    def version_names(self) -> List[str]:
        return list(self.name_chain)

    def registered_versions(self) -> Dict[str, "VersionDefinition"]:
        return dict(self._versions)

    @property
    def composite_name(self) -> Optional[str]:
        if not self.name_chain:
            return None
        return VERSION_NAME_SEPARATOR.join(self.name_chain)

    def applies(self, name, candidate_file) -> bool:
        condition = self._conditions.get(str(name))
        if condition is None:
            return True
        return bool(condition(candidate_file))

    def freeze(self):
        self.frozen = True
        for child in self._versions.values():
            child.freeze()


class VersionStatus(enum.Enum):
    PENDING = "pending"
    APPLIED = "applied"
    EXCLUDED = "excluded"


class VersionEntry:
    __slots__ = ("uploader", "status")

    def __init__(self, uploader):
        self.uploader = uploader
        self.status = VersionStatus.PENDING

    def __repr__(self):
        return f"<VersionEntry {self.uploader.version_name} {self.status.value}>"


class VersionAccessor:
    """
    `version` on an uploader class registers a version on its definition;
    on an uploader instance it looks up the child uploader by name.
    """

    def __get__(self, instance, owner):
        if instance is None:
            return owner.definition.version
        return instance.get_version


class Versions:
    """
    Instance-side version handling, mixed into the uploader.

    Expects the host class to provide `model`, `mounted_as`, `file`,
    `cache_id`, `cache`, `store`, `retrieve_from_cache`,
    `retrieve_from_store`, `remove`, `full_filename`,
    `full_original_filename` and `url`.
    """

    definition: VersionDefinition
    _entries: Optional[Dict[str, VersionEntry]] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.definition = VersionDefinition(cls)

    version = VersionAccessor()

    @property
    def _version_entries(self) -> Dict[str, VersionEntry]:
        if self._entries is None:
            entries = {}
            for name, definition in self.definition.registered_versions().items():
                child = definition.uploader_class(
                    self.model, self.mounted_as, definition=definition
                )
                entries[name] = VersionEntry(child)
            self._entries = entries
        return self._entries

    @property
    def versions(self) -> Dict[str, Any]:
        return {
            name: entry.uploader
            for name, entry in self._version_entries.items()
            if entry.status is not VersionStatus.EXCLUDED
        }

    def get_version(self, name):
        entry = self._version_entries.get(str(name))
        if entry is None or entry.status is VersionStatus.EXCLUDED:
            return None
        return entry.uploader

    def version_status(self, name) -> Optional[VersionStatus]:
        entry = self._version_entries.get(str(name))
        return entry.status if entry else None

    @property
    def version_name(self) -> Optional[str]:
        return self.definition.composite_name

    def url(self, *names):
        """
        Without arguments, the url of this file. With version names, the url
        of that (possibly nested) version:

            uploader.url()                  # /media/uploads/x/photo.png
            uploader.url("thumb")           # /media/uploads/x/thumb_photo.png
            uploader.url("thumb", "small")  # /media/uploads/x/thumb_small_photo.png
        """
        if names:
            child = self.get_version(names[0])
            if child is None:
                raise UnknownVersionError(names[0])
            return child.url(*names[1:])
        return super().url()

    def recreate_versions(self):
        with self.with_callbacks("recreate_versions", self.file):
            for child in self.versions.values():
                child.store(self.file)

    def full_filename(self, for_file):
        return self._prefixed(super().full_filename(for_file))

    def full_original_filename(self):
        return self._prefixed(super().full_original_filename())

    def _prefixed(self, filename):
        return VERSION_NAME_SEPARATOR.join(
            part for part in (self.version_name, filename) if part
        )

    def satisfies_version_requirements(self, name, new_file=None, evict=True) -> bool:
        name = str(name)
        entry = self._version_entries.get(name)
        if entry is None:
            raise UnknownVersionError(name)
        candidate = self.file if new_file is None else new_file
        if self.definition.applies(name, candidate):
            entry.status = VersionStatus.APPLIED
            return True
        if evict:
            logger.debug(
                "Excluding version %s: condition failed for %s",
                entry.uploader.version_name,
                getattr(candidate, "name", candidate),
            )
            entry.status = VersionStatus.EXCLUDED
        return False

    def _applicable_versions(self, new_file=None):
        for name, entry in list(self._version_entries.items()):
            if entry.status is VersionStatus.EXCLUDED:
                continue
            if self.satisfies_version_requirements(name, new_file):
                yield entry.uploader

    # after-hooks, registered on Uploader

    def cache_versions(self, new_file):
        for child in self._applicable_versions(new_file):
            child.cache_id = self.cache_id
            child.cache(new_file)

    def store_versions(self, new_file=None):
        for child in self._applicable_versions(new_file):
            child.store(new_file)

    def remove_versions(self):
        for entry in self._version_entries.values():
            child = entry.uploader
            # excluded children never retrieved their stored file
            if child.blank and self.identifier and self.cache_id is None:
                child.locate_stored(self.identifier)
            child.remove()

    def retrieve_versions_from_cache(self, cache_name):
        for child in self._applicable_versions():
            child.retrieve_from_cache(cache_name)

    def retrieve_versions_from_store(self, identifier):
        for child in self._applicable_versions():
            child.retrieve_from_store(identifier)
