"""
Domain exceptions.

Each exception carries the machine-readable code and HTTP status used by the
error handling middleware when it is surfaced to a caller.
"""


class TrashLogError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(TrashLogError):
    """A required field is missing, mistyped or out of range."""
    status_code = 400
    code = "INVALID_INPUT"


class InvalidFilenameError(TrashLogError):
    """A photo filename failed the safe-pattern check."""
    status_code = 400
    code = "INVALID_FILENAME"


class PhotoNotFoundError(TrashLogError):
    status_code = 404
    code = "FILE_NOT_FOUND"


class EntryNotFoundError(TrashLogError):
    status_code = 404
    code = "ENTRY_NOT_FOUND"


class PhotoTooLargeError(TrashLogError):
    status_code = 413
    code = "FILE_TOO_LARGE"


class UnsupportedMediaError(TrashLogError):
    """Uploaded file is not a JPEG or PNG image."""
    status_code = 415
    code = "UNSUPPORTED_MEDIA_TYPE"


class StorageError(TrashLogError):
    """
    Persistence layer failure.

    The message is meant for logs only; callers receive a generic message.
    """
    status_code = 500
    code = "INTERNAL_ERROR"
