"""Unit tests for logging utilities."""

import json
import logging

import pytest

from toolkit.utils.log_utils import (
    JsonFormatter,
    LocalDevFormatter,
    format_duration,
    format_size,
    log_phase,
    log_upload_rejected,
    log_upload_saved,
    parse_log_level,
)


class TestFormatSize:
    def test_formats_bytes(self):
        """Format bytes as human-readable string."""
        assert format_size(500) == "500b"
        assert format_size(0) == "0b"

    def test_formats_kilobytes(self):
        assert format_size(1024) == "1.0kb"
        assert format_size(1536) == "1.5kb"

    def test_formats_megabytes(self):
        assert format_size(1048576) == "1.0mb"
        assert format_size(104857600) == "100.0mb"


class TestFormatDuration:
    def test_formats_milliseconds(self):
        assert format_duration(500) == "500ms"
        assert format_duration(0) == "0ms"

    def test_formats_seconds(self):
        assert format_duration(1000) == "1.0s"
        assert format_duration(15234) == "15.2s"


class TestParseLogLevel:
    @pytest.mark.parametrize(
        "value, expected",
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("nonsense", logging.INFO)],
    )
    def test_levels(self, value, expected):
        assert parse_log_level(value) == expected


class TestFormatters:
    def _record(self, msg="hello", level=logging.INFO):
        return logging.LogRecord("toolkit.test", level, __file__, 1, msg, None, None)

    def test_json_formatter(self):
        entry = json.loads(JsonFormatter().format(self._record()))

        assert entry["severity"] == "INFO"
        assert entry["message"] == "hello"
        assert entry["logger"] == "toolkit.test"
        assert "timestamp" in entry

    def test_local_formatter(self):
        line = LocalDevFormatter().format(self._record(level=logging.WARNING))

        assert "WARN" in line
        assert line.endswith("hello")


class TestEventHelpers:
    def test_upload_saved(self, caplog):
        logger = logging.getLogger("toolkit.test")
        with caplog.at_level(logging.INFO, logger="toolkit.test"):
            log_upload_saved(logger, "img.png", "abc.png", 2048, "image/png")

        assert "[upload.saved] img.png -> abc.png | image/png (2.0kb)" in caplog.text

    def test_upload_rejected_skipped(self, caplog):
        logger = logging.getLogger("toolkit.test")
        with caplog.at_level(logging.WARNING, logger="toolkit.test"):
            log_upload_rejected(logger, "bad.txt", "text/plain", skipped=True)

        assert "[upload.rejected] bad.txt" in caplog.text
        assert "skipped" in caplog.text

    def test_log_phase(self, caplog):
        logger = logging.getLogger("toolkit.test")
        with caplog.at_level(logging.DEBUG, logger="toolkit.test"):
            with log_phase(logger, "upload.ingest", context="uploads"):
                pass

        assert "[upload.ingest] start (uploads)" in caplog.text
        assert "[upload.ingest] done in " in caplog.text

    def test_log_phase_failure(self, caplog):
        logger = logging.getLogger("toolkit.test")
        with caplog.at_level(logging.DEBUG, logger="toolkit.test"):
            with pytest.raises(RuntimeError):
                with log_phase(logger, "upload.ingest"):
                    raise RuntimeError("disk gone")

        assert "[upload.ingest] failed after " in caplog.text
        assert "done in" not in caplog.text
