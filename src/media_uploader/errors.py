"""Domain-specific exceptions for the upload pipeline."""

from __future__ import annotations


def _megabytes(size_bytes: int) -> int:
    return round(size_bytes / (1024 * 1024))


class UploadError(Exception):
    """Base class for upload-related errors."""


class SizeExceededError(UploadError):
    """Raised when the raw payload exceeds the absolute upload ceiling."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(f"File is too large. Max {_megabytes(limit_bytes)}MB")


class CompressionUnconvergedError(UploadError):
    """Raised when no compression attempt fits the byte budget."""

    def __init__(self, max_bytes: int, attempts: int) -> None:
        self.max_bytes = max_bytes
        self.attempts = attempts
        super().__init__(
            "File is too large even after compression. "
            f"Max {_megabytes(max_bytes)}MB"
        )


class ImageDecodeError(UploadError):
    """Raised when a payload declared as an image cannot be decoded."""


class TransportError(UploadError):
    """Raised when the proxy upload tier fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
