"""Content-type sniffing from leading bytes.

The client-declared type of a part is never trusted; libmagic classifies the
first 512 bytes of the file instead.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

import magic

logger = logging.getLogger(__name__)

SNIFF_LEN = 512

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def detect_content_type(data: bytes) -> str:
    """Return the MIME type libmagic reports for the leading bytes of a file.

    Only the first 512 bytes are considered. Falls back to
    ``application/octet-stream`` when libmagic has no answer; never raises.
    """
    head = bytes(data[:SNIFF_LEN])
    try:
        content_type = magic.from_buffer(head, mime=True)
    except magic.MagicException as e:
        logger.warning(f"[sniff.failed] {len(head)}b | {e}")
        return DEFAULT_CONTENT_TYPE
    return content_type or DEFAULT_CONTENT_TYPE


def sniff_stream(stream: BinaryIO) -> str:
    """Classify a seekable stream without consuming it.

    Reads up to 512 bytes from the current position and seeks back, so the
    full byte sequence is still there for the caller to copy.
    """
    start = stream.tell()
    head = stream.read(SNIFF_LEN)
    stream.seek(start)
    return detect_content_type(head)


def mime_essence(content_type: str) -> str:
    """Strip parameters from a MIME type: ``"Text/Plain; charset=x"`` -> ``"text/plain"``."""
    return content_type.split(";", 1)[0].strip().lower()
