"""
Error taxonomy for Shortlink.

Every failure the service can report belongs to exactly one ErrorKind.
Each kind has one exception class carrying its HTTP status and the short
public message sent to clients; the internal cause travels on
``__cause__`` and is only ever logged.

    ValidationError     -> 400  malformed or unparsable submitted URL
    NotFoundError       -> 404  no Link Record for the requested id
    StorageError        -> 500  connectivity, constraint violation, bad row shape
    ConfigurationError  -> 500  e.g. a malformed base URL at join time
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    CONFIGURATION = "configuration"


class ShortlinkError(Exception):
    """Base class; subclasses pin `kind`, `status_code` and `public_message`."""

    kind: ErrorKind
    status_code: int = 500
    public_message: str = "server error"

    @property
    def is_client_error(self) -> bool:
        return self.status_code < 500


class ValidationError(ShortlinkError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    public_message = "invalid url"


class NotFoundError(ShortlinkError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    public_message = "not found"


class StorageError(ShortlinkError):
    kind = ErrorKind.STORAGE


class ConfigurationError(ShortlinkError):
    kind = ErrorKind.CONFIGURATION
