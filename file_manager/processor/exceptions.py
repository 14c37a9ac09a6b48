from __future__ import annotations

from typing import Any


class FileManagerError(Exception):
    """Base error carrying the HTTP status and the payload pieces for `build_error_response`."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        details: list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.details = list(details or [])
        self.extra = dict(extra or {})
        super().__init__(self.message)


class MalformedRequest(FileManagerError):
    status_code = 400
    message = "Malformed multipart request"


class NoFileProvided(FileManagerError):
    status_code = 400
    message = "No file provided in the request"


class InvalidMetadata(FileManagerError):
    status_code = 400
    message = "Invalid metadata format"


class FileTooLarge(FileManagerError):
    status_code = 413
    message = "File too large"


class FileNotFound(FileManagerError):
    status_code = 404
    message = "File not found"
