"""Error types raised by the toolkit.

Every error carries the HTTP status code a web layer should answer with, so
route handlers can translate failures without knowing their kind.
"""

from __future__ import annotations

from fastapi import status


class ToolkitError(Exception):
    """Base class for all toolkit failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IngestError(ToolkitError):
    """Failure while ingesting a multipart upload."""


class MalformedMultipart(IngestError):
    """The body is not valid multipart data or a part cannot be read."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidFileType(IngestError):
    """A part's sniffed content type is not in the allow-list."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, content_type: str, filename: str | None = None):
        super().__init__(f"The uploaded file type '{content_type}' is not permitted")
        self.content_type = content_type
        self.filename = filename


class FileTooLarge(IngestError):
    """A part's size exceeds the configured ceiling."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, limit: int, filename: str | None = None):
        super().__init__(f"File too large. Maximum size: {limit} bytes")
        self.limit = limit
        self.filename = filename


class IOFailure(IngestError):
    """Reading the body or writing to the destination failed."""


class NoFileProvided(IngestError):
    """The single-file variant found no file parts."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "No file was uploaded"):
        super().__init__(message)


class InvalidJSON(ToolkitError):
    """A request body is not the single JSON value that was expected."""

    status_code = status.HTTP_400_BAD_REQUEST


class RequestTooLarge(ToolkitError):
    """A request body exceeds the accepted size."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


class NotFound(ToolkitError):
    """A requested file does not exist or lies outside its directory."""

    status_code = status.HTTP_404_NOT_FOUND
