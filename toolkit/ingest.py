"""Multipart file ingestion.

Reads file parts one at a time, sniffs each part's real content type, checks it
against the configured allow-list, picks the stored name and streams the bytes
into the destination directory.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO, Protocol

from toolkit.errors import (
    FileTooLarge,
    IngestError,
    InvalidFileType,
    IOFailure,
    MalformedMultipart,
    NoFileProvided,
)
from toolkit.multipart import DEFAULT_CHUNK_SIZE, DEFAULT_SPOOL_MAX_SIZE, MultipartReader
from toolkit.schemas.upload import UploadConfiguration, UploadedFile
from toolkit.utils.id_utils import new_file_name
from toolkit.utils.log_utils import (
    log_ingest_completed,
    log_upload_failed,
    log_upload_rejected,
    log_upload_saved,
)
from toolkit.utils.sniff import sniff_stream
from toolkit.utils.storage_utils import resolve_inside

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 64 * 1024
MAX_NAME_ATTEMPTS = 5


class UploadPart(Protocol):
    """Anything carrying a client file name and a seekable binary file."""

    filename: str | None
    file: BinaryIO


def sanitize_filename(name: str) -> str:
    """Reduce a client-declared name to a safe base name.

    Drops directory components (``/`` and ``\\``), control characters and
    leading dots. May return an empty string.
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    base = "".join(ch for ch in base if ch.isprintable())
    return base.strip().lstrip(".")


def ingest(
    body: BinaryIO,
    content_type: str | None,
    destination_dir: str | os.PathLike,
    config: UploadConfiguration | None = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
) -> list[UploadedFile]:
    """Parse a multipart body and store every file part in ``destination_dir``.

    Args:
        body: Blocking binary stream holding the request body
        content_type: The request's ``Content-Type`` header (carries the boundary)
        destination_dir: Existing, writable directory
        config: Upload policy; defaults to accept-all with renaming

    Returns:
        One ``UploadedFile`` per stored part, in arrival order (may be empty)

    Raises:
        IngestError: on the first part that cannot be parsed, validated or written
    """
    config = config or UploadConfiguration()
    with MultipartReader(
        body,
        content_type,
        max_part_size=config.max_file_size,
        chunk_size=chunk_size,
        spool_max_size=spool_max_size,
    ) as reader:
        return ingest_parts(reader, destination_dir, config)


def ingest_one(
    body: BinaryIO,
    content_type: str | None,
    destination_dir: str | os.PathLike,
    config: UploadConfiguration | None = None,
    **reader_options,
) -> UploadedFile:
    """Store the first file part of a multipart body under a generated name.

    Renaming is always applied, whatever ``config.rename`` says.

    Raises:
        NoFileProvided: if the body holds no file part
    """
    config = (config or UploadConfiguration()).model_copy(update={"rename": True})
    with MultipartReader(
        body,
        content_type,
        max_part_size=config.max_file_size,
        **reader_options,
    ) as reader:
        return ingest_one_part(reader, destination_dir, config)


def ingest_one_part(
    parts: Iterable[UploadPart],
    destination_dir: str | os.PathLike,
    config: UploadConfiguration | None = None,
) -> UploadedFile:
    """Single-file variant of ``ingest_parts``; renaming is forced on."""
    config = (config or UploadConfiguration()).model_copy(update={"rename": True})
    uploaded = ingest_parts(parts, destination_dir, config, limit=1)
    if not uploaded:
        raise NoFileProvided()
    return uploaded[0]


def ingest_parts(
    parts: Iterable[UploadPart],
    destination_dir: str | os.PathLike,
    config: UploadConfiguration,
    limit: int | None = None,
) -> list[UploadedFile]:
    """Store already-parsed parts, sequentially and in order.

    Stops after ``limit`` stored files when given. Files written before a
    failure stay on disk unless ``config.cleanup_on_error`` is set.
    """
    uploaded: list[UploadedFile] = []
    total_bytes = 0
    current_name: str | None = None
    start_time = time.time()

    try:
        for part in parts:
            current_name = part.filename
            result = _ingest_part(part, destination_dir, config)
            if result is None:
                continue
            uploaded.append(result)
            total_bytes += result.size_bytes
            if limit is not None and len(uploaded) >= limit:
                break
    except IngestError as exc:
        log_upload_failed(logger, current_name, exc)
        if config.cleanup_on_error:
            _remove_written(destination_dir, uploaded)
        raise

    log_ingest_completed(logger, len(uploaded), total_bytes, start_time)
    return uploaded


def _ingest_part(
    part: UploadPart,
    destination_dir: str | os.PathLike,
    config: UploadConfiguration,
) -> UploadedFile | None:
    original_name = part.filename or ""

    try:
        content_type = sniff_stream(part.file)
    except OSError as exc:
        raise IOFailure(f"Failed to read upload '{original_name}': {exc}") from exc

    if not config.allows(content_type):
        log_upload_rejected(logger, original_name, content_type, skipped=config.skip_disallowed)
        if config.skip_disallowed:
            return None
        raise InvalidFileType(content_type, original_name)

    new_name, target, out = _open_target(destination_dir, original_name, config)
    try:
        with out:
            size_bytes = _copy_stream(part.file, out, config.max_file_size, original_name)
    except IngestError:
        if config.cleanup_on_error:
            target.unlink(missing_ok=True)
        raise

    log_upload_saved(logger, original_name, new_name, size_bytes, content_type)
    return UploadedFile(
        original_name=original_name,
        new_name=new_name,
        size_bytes=size_bytes,
        content_type=content_type,
    )


def _stored_name(original_name: str, rename: bool) -> str:
    if rename:
        return new_file_name(original_name)

    name = sanitize_filename(original_name)
    if not name:
        raise MalformedMultipart(f"Invalid file name '{original_name}'")
    return name


def _open_target(
    destination_dir: str | os.PathLike,
    original_name: str,
    config: UploadConfiguration,
) -> tuple[str, Path, BinaryIO]:
    # Generated names are created exclusively; client names overwrite.
    mode = "xb" if config.rename else "wb"

    for _ in range(MAX_NAME_ATTEMPTS):
        new_name = _stored_name(original_name, config.rename)
        try:
            target = resolve_inside(destination_dir, new_name)
        except ValueError as exc:
            raise MalformedMultipart(f"Invalid file name '{original_name}'") from exc

        try:
            return new_name, target, open(target, mode)
        except FileExistsError:
            logger.debug(f"[upload.collision] {new_name}, generating another name")
        except OSError as exc:
            raise IOFailure(f"Failed to create '{new_name}': {exc}") from exc

    raise IOFailure(f"Could not find a free name for '{original_name}'")


def _copy_stream(src: BinaryIO, dst: BinaryIO, max_size: int, filename: str) -> int:
    written = 0
    while True:
        try:
            chunk = src.read(COPY_CHUNK_SIZE)
        except OSError as exc:
            raise IOFailure(f"Failed to read upload '{filename}': {exc}") from exc
        if not chunk:
            return written

        written += len(chunk)
        if max_size and written > max_size:
            raise FileTooLarge(max_size, filename)

        try:
            dst.write(chunk)
        except OSError as exc:
            raise IOFailure(f"Failed to write upload '{filename}': {exc}") from exc


def _remove_written(destination_dir: str | os.PathLike, uploaded: list[UploadedFile]) -> None:
    for item in uploaded:
        path = Path(destination_dir) / item.new_name
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning(f"[upload.cleanup] could not remove {item.new_name}: {exc}")
        else:
            logger.info(f"[upload.cleanup] removed {item.new_name}")
