# gridfile/errors.py
"""
Error taxonomy for the file registry.

Only argument validation and lookup failures originate here. Errors raised
by pymongo/gridfs or the filesystem are propagated unmodified.
"""

from gridfile.constants import ErrorMessages


class GridFileError(Exception):
    """Base class for registry errors."""


class InvalidArgumentError(GridFileError, ValueError):
    """Raised when the registry or a write is configured with unusable arguments."""


class RegistryNotInitializedError(GridFileError, RuntimeError):
    """Raised when the module-level registry is used before initialize()."""

    def __init__(self, message: str = ErrorMessages.NOT_INITIALIZED):
        super().__init__(message)


class InvalidSourceError(GridFileError, TypeError):
    """Raised when a write source is not a stream, bytes or a path."""

    def __init__(self, message: str = ErrorMessages.INVALID_SOURCE):
        super().__init__(message)


class InvalidSelectorError(GridFileError, TypeError):
    """Raised when a selector is neither an identifier nor a filename."""

    def __init__(self, message: str = ErrorMessages.INVALID_SELECTOR):
        super().__init__(message)


class NoMatchError(GridFileError, LookupError):
    """Raised when no file metadata matches a selector."""

    def __init__(self, message: str = ErrorMessages.NO_MATCH):
        super().__init__(message)


class NotFoundError(GridFileError, LookupError):
    """Raised when file metadata exists but its chunk data is missing."""

    def __init__(self, message: str = ErrorMessages.NOT_FOUND):
        super().__init__(message)
