"""Blocking multipart/form-data reader.

Wraps the push parser from ``python-multipart`` so a plain binary stream can be
consumed as an iterator of file parts, one completed part at a time and in
arrival order.
"""

from __future__ import annotations

import logging
import tempfile
from collections import deque
from collections.abc import Iterator
from typing import BinaryIO

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from toolkit.errors import FileTooLarge, IOFailure, MalformedMultipart

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_SPOOL_MAX_SIZE = 1024 * 1024


class FilePart:
    """One file segment of a multipart body, spooled and rewound to offset 0."""

    def __init__(self, field_name: str, filename: str, headers: dict[str, str], file: BinaryIO):
        self.field_name = field_name
        self.filename = filename
        self.headers = headers
        self.file = file

    @property
    def content_type(self) -> str | None:
        """Client-declared type; informational only."""
        return self.headers.get("content-type")

    def close(self) -> None:
        self.file.close()

    def __repr__(self) -> str:
        return f"FilePart(field_name={self.field_name!r}, filename={self.filename!r})"


def parse_boundary(content_type: str | None) -> bytes:
    """Extract the boundary from a multipart ``Content-Type`` header value."""
    if not content_type:
        raise MalformedMultipart("Missing Content-Type header")

    ctype, options = parse_options_header(content_type)
    if not ctype.startswith(b"multipart/"):
        raise MalformedMultipart(f"Expected a multipart body, got '{ctype.decode('latin-1')}'")

    boundary = options.get(b"boundary")
    if not boundary:
        raise MalformedMultipart("Multipart Content-Type has no boundary")
    return boundary


class MultipartReader:
    """Iterate over the file parts of a multipart body read from ``stream``.

    Parts without a filename (plain form fields) are skipped. A yielded
    ``FilePart`` stays open until the iterator advances; everything still held
    by the reader is closed by ``close()`` or on leaving the ``with`` block.
    """

    def __init__(
        self,
        stream: BinaryIO,
        content_type: str | None,
        *,
        max_part_size: int = 0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
    ):
        self._stream = stream
        self._max_part_size = max_part_size
        self._chunk_size = chunk_size
        self._spool_max_size = spool_max_size

        self._parser = MultipartParser(
            parse_boundary(content_type),
            callbacks={
                "on_part_begin": self._on_part_begin,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
                "on_end": self._on_end,
            },
        )

        self._ready: deque[FilePart] = deque()
        self._current: FilePart | None = None
        self._yielded: FilePart | None = None
        self._current_size = 0
        self._in_part = False
        self._headers: dict[str, str] = {}
        self._header_field = b""
        self._header_value = b""
        self._received = 0
        self._ended = False
        self._eof = False
        self._closed = False

    def __enter__(self) -> MultipartReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FilePart]:
        while True:
            while self._ready:
                self._release_yielded()
                self._yielded = self._ready.popleft()
                yield self._yielded
            self._release_yielded()
            if self._eof or self._closed:
                return
            chunk = self._read_chunk()
            if chunk:
                self._received += len(chunk)
                self._feed(chunk)
            else:
                self._finish()

    def close(self) -> None:
        """Release spooled files that were never handed out."""
        if self._closed:
            return
        self._closed = True
        self._release_yielded()
        if self._current is not None:
            self._current.close()
            self._current = None
        while self._ready:
            self._ready.popleft().close()

    def _release_yielded(self) -> None:
        if self._yielded is not None:
            self._yielded.close()
            self._yielded = None

    def _read_chunk(self) -> bytes:
        try:
            return self._stream.read(self._chunk_size)
        except OSError as exc:
            raise IOFailure(f"Failed to read request body: {exc}") from exc

    def _feed(self, chunk: bytes) -> None:
        try:
            self._parser.write(chunk)
        except MultipartParseError as exc:
            raise MalformedMultipart(f"Invalid multipart body: {exc}") from exc

    def _finish(self) -> None:
        self._eof = True
        self._parser.finalize()
        if self._in_part:
            raise MalformedMultipart("Multipart body ended in the middle of a part")
        if self._received and not self._ended:
            raise MalformedMultipart("Multipart body ended before the closing boundary")

    # Parser callbacks

    def _on_part_begin(self) -> None:
        self._in_part = True
        self._headers = {}
        self._header_field = b""
        self._header_value = b""
        self._current = None
        self._current_size = 0

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        name = self._header_field.decode("latin-1").strip().lower()
        self._headers[name] = self._header_value.decode("latin-1").strip()
        self._header_field = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get("content-disposition"))
        filename = options.get(b"filename")
        if not filename:
            # plain form field
            return

        self._current = FilePart(
            field_name=options.get(b"name", b"").decode("utf-8", errors="replace"),
            filename=filename.decode("utf-8", errors="replace"),
            headers=self._headers,
            file=tempfile.SpooledTemporaryFile(max_size=self._spool_max_size),
        )

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._current is None:
            return
        self._current_size += end - start
        if self._max_part_size and self._current_size > self._max_part_size:
            raise FileTooLarge(self._max_part_size, self._current.filename)
        self._current.file.write(data[start:end])

    def _on_part_end(self) -> None:
        self._in_part = False
        if self._current is None:
            return
        self._current.file.seek(0)
        logger.debug(f"[multipart.part] {self._current.filename} ({self._current_size}b)")
        self._ready.append(self._current)
        self._current = None

    def _on_end(self) -> None:
        self._ended = True
