"""HTTP-adjacent helpers built around multipart file ingestion."""

from toolkit.errors import (
    FileTooLarge,
    IngestError,
    InvalidFileType,
    InvalidJSON,
    IOFailure,
    MalformedMultipart,
    NoFileProvided,
    NotFound,
    RequestTooLarge,
    ToolkitError,
)
from toolkit.ingest import ingest, ingest_one, ingest_one_part, ingest_parts
from toolkit.schemas import JSONPayload, UploadConfiguration, UploadedFile
from toolkit.utils.id_utils import random_string
from toolkit.utils.slug import slugify
from toolkit.utils.sniff import detect_content_type, sniff_stream
from toolkit.utils.storage_utils import create_dir_if_not_exist

__all__ = [
    # Errors
    "ToolkitError",
    "IngestError",
    "MalformedMultipart",
    "InvalidFileType",
    "FileTooLarge",
    "IOFailure",
    "NoFileProvided",
    "InvalidJSON",
    "RequestTooLarge",
    "NotFound",
    # Ingestion
    "ingest",
    "ingest_one",
    "ingest_parts",
    "ingest_one_part",
    # Schemas
    "JSONPayload",
    "UploadConfiguration",
    "UploadedFile",
    # Utilities
    "create_dir_if_not_exist",
    "detect_content_type",
    "random_string",
    "slugify",
    "sniff_stream",
]
