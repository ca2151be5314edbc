class UploaderError(Exception):
    """Base class for all uploader-related errors."""

    pass


class UnknownVersionError(UploaderError):
    """A version was requested that this uploader does not (or no longer) hold."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Version {name} doesn't exist!")


class InvalidCacheNameError(UploaderError):
    """Malformed cache id or cache name."""

    pass


class DefinitionFrozenError(UploaderError):
    """Raised when registering versions on a definition already in use."""

    pass


class UploadMissingError(UploaderError):
    """Upload not found in the DB."""

    pass


class UploadValidationError(UploaderError):
    """Raised when the service is given unusable input."""

    pass
