"""Tests for content-type sniffing."""

import io

import magic
import pytest

from toolkit.tests.factories import make_gif
from toolkit.utils import sniff
from toolkit.utils.sniff import (
    DEFAULT_CONTENT_TYPE,
    SNIFF_LEN,
    detect_content_type,
    mime_essence,
    sniff_stream,
)


class TestDetectContentType:
    def test_png(self, png_bytes):
        assert detect_content_type(png_bytes) == "image/png"

    def test_jpeg(self, jpeg_bytes):
        assert detect_content_type(jpeg_bytes) == "image/jpeg"

    def test_gif(self):
        assert detect_content_type(make_gif()) == "image/gif"

    def test_pdf(self):
        data = b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog >>\nendobj\n"
        assert detect_content_type(data) == "application/pdf"

    def test_plain_text(self):
        data = b"Now is the time for all good men to come to the aid of the party.\n"
        assert mime_essence(detect_content_type(data)) == "text/plain"

    def test_html(self):
        data = b"<!DOCTYPE html>\n<html><head><title>hi</title></head><body></body></html>\n"
        assert mime_essence(detect_content_type(data)) == "text/html"

    def test_empty_input(self):
        assert detect_content_type(b"") == "application/x-empty"

    def test_only_first_512_bytes_are_classified(self, monkeypatch):
        seen = []

        def fake_from_buffer(buffer, mime=False):
            seen.append(len(buffer))
            return "text/plain"

        monkeypatch.setattr(sniff.magic, "from_buffer", fake_from_buffer)

        detect_content_type(b"a" * (SNIFF_LEN * 3))

        assert seen == [SNIFF_LEN]

    def test_no_answer_falls_back(self, monkeypatch):
        monkeypatch.setattr(sniff.magic, "from_buffer", lambda buffer, mime=False: "")

        assert detect_content_type(b"\x01\x02\x03") == DEFAULT_CONTENT_TYPE

    def test_libmagic_error_falls_back(self, monkeypatch):
        """Sniffing never raises, even when libmagic does."""

        def broken(buffer, mime=False):
            raise magic.MagicException("could not load magic database")

        monkeypatch.setattr(sniff.magic, "from_buffer", broken)

        assert detect_content_type(b"anything") == DEFAULT_CONTENT_TYPE


class TestSniffStream:
    def test_stream_is_rewound(self, png_bytes):
        """Sniffing leaves the full byte sequence readable."""
        stream = io.BytesIO(png_bytes)

        assert sniff_stream(stream) == "image/png"
        assert stream.tell() == 0
        assert stream.read() == png_bytes

    def test_short_stream(self):
        stream = io.BytesIO(b"hello there\n")

        assert mime_essence(sniff_stream(stream)) == "text/plain"
        assert stream.read() == b"hello there\n"

    def test_sniffs_from_current_position(self, jpeg_bytes):
        stream = io.BytesIO(b"junk" + jpeg_bytes)
        stream.seek(4)

        assert sniff_stream(stream) == "image/jpeg"
        assert stream.tell() == 4


class TestMimeEssence:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("text/plain; charset=utf-8", "text/plain"),
            ("Image/PNG", "image/png"),
            ("  application/pdf  ", "application/pdf"),
        ],
    )
    def test_strips_parameters(self, value, expected):
        assert mime_essence(value) == expected
