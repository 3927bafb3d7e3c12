"""Exceptions for files app."""

from http import HTTPStatus

from server.apps.files.conf import MEGABYTE


class UploadError(Exception):
    """Base class for upload rejections reported back to the client."""

    status_code = HTTPStatus.BAD_REQUEST


class UnsupportedMediaTypeError(UploadError):
    """Raised when a file's content type is not on the allow-list."""

    def __init__(self, mime_type: str, allowed: tuple[str, ...]) -> None:
        """Initialize UnsupportedMediaTypeError.

        Args:
            mime_type: Rejected content type.
            allowed: Every accepted content type.
        """
        self.mime_type = mime_type
        self.allowed = allowed
        super().__init__(
            f"File type '{mime_type}' is not allowed. "
            f'Allowed types: {", ".join(allowed)}',
        )


class FileTooLargeError(UploadError):
    """Raised when a single file exceeds the per-file size limit."""

    def __init__(self, filename: str, limit_bytes: int) -> None:
        """Initialize FileTooLargeError.

        Args:
            filename: Original name of the offending file.
            limit_bytes: Configured per-file limit.
        """
        self.filename = filename
        self.limit_bytes = limit_bytes
        super().__init__(
            'File too large. Maximum size is '
            f'{limit_bytes / MEGABYTE:g}MB',
        )


class TooManyFilesError(UploadError):
    """Raised when a request carries more files than allowed."""

    def __init__(self, limit: int) -> None:
        """Initialize TooManyFilesError.

        Args:
            limit: Configured maximum number of files.
        """
        self.limit = limit
        super().__init__(f'Too many files. Maximum is {limit} files')


class UnexpectedFieldError(UploadError):
    """Raised for files sent under an unknown or already filled field."""

    def __init__(self, field_name: str) -> None:
        """Initialize UnexpectedFieldError.

        Args:
            field_name: Form field name the file was sent under.
        """
        self.field_name = field_name
        super().__init__(f"Unexpected file field '{field_name}'")


class ImageOptimizationError(Exception):
    """Raised when re-encoding an image fails.

    Never leaves the optimizer: the original file is kept and the
    error is logged.
    """
