"""Pydantic schemas for toolkit results and responses."""

from toolkit.schemas.json_payload import JSONPayload
from toolkit.schemas.upload import UploadConfiguration, UploadedFile

__all__ = [
    # JSON
    "JSONPayload",
    # Upload
    "UploadConfiguration",
    "UploadedFile",
]
