"""Logging utilities for the toolkit.

Provides consistent, readable logging with bracket notation.
Format: [event.name] context | human message
"""

import contextlib
import json
import logging
import sys
import time
from collections.abc import Generator


class JsonFormatter(logging.Formatter):
    """Format logs as one JSON object per line for log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, self.datefmt),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


class LocalDevFormatter(logging.Formatter):
    """Human-readable format for local development."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        level = record.levelname[:4]
        timestamp = self.formatTime(record, "%H:%M:%S")
        message = record.getMessage()

        formatted = f"{color}{timestamp} {level}{self.RESET} {message}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def parse_log_level(level_str: str) -> int:
    """Convert string log level to logging constant.

    Args:
        level_str: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        logging level constant (defaults to INFO for invalid input)
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def configure_logging(level: str | int = logging.INFO, fmt: str = "text") -> None:
    """
    Configure root logging for the service.

    - fmt="text": Human-readable colored output
    - fmt="json": One JSON object per line

    Args:
        level: Logging level as string ("DEBUG", "INFO", etc.) or int constant
        fmt: Output format, "text" or "json"
    """
    if isinstance(level, str):
        level = parse_log_level(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if fmt == "json" else LocalDevFormatter())

    logging.basicConfig(level=level, handlers=[handler], force=True)

    # Suppress noisy library logs (even at DEBUG level)
    for noisy_logger in [
        "httpx",
        "httpcore",
        "multipart",
        "python_multipart",
        "uvicorn.access",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


def format_size(size_bytes: int) -> str:
    """Format byte size as human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.2mb", "500kb", "50b")
    """
    if size_bytes >= 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f}mb"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f}kb"
    else:
        return f"{size_bytes}b"


def format_duration(duration_ms: int) -> str:
    """Format duration as human-readable string.

    Args:
        duration_ms: Duration in milliseconds

    Returns:
        Formatted string (e.g., "15.2s", "250ms")
    """
    if duration_ms >= 1000:
        return f"{duration_ms / 1000:.1f}s"
    else:
        return f"{duration_ms}ms"


@contextlib.contextmanager
def log_phase(
    logger: logging.Logger,
    phase: str,
    context: str | None = None,
) -> Generator[None, None, None]:
    """Time a block and log its outcome at DEBUG level in bracket notation.

    Output:
        [upload.form] start (/api/uploads)
        [upload.form] done in 120ms (/api/uploads)

    A block that raises logs ``failed after ...`` instead; the exception propagates.
    """
    suffix = f" ({context})" if context else ""
    logger.debug(f"[{phase}] start{suffix}")
    start_time = time.time()

    try:
        yield
    except Exception:
        elapsed = format_duration(int((time.time() - start_time) * 1000))
        logger.debug(f"[{phase}] failed after {elapsed}{suffix}")
        raise

    elapsed = format_duration(int((time.time() - start_time) * 1000))
    logger.debug(f"[{phase}] done in {elapsed}{suffix}")


def log_upload_saved(
    logger: logging.Logger,
    original_name: str,
    new_name: str,
    size_bytes: int,
    content_type: str,
) -> None:
    """Log a file part written to disk."""
    renamed = f" -> {new_name}" if new_name != original_name else ""
    logger.info(
        f"[upload.saved] {original_name}{renamed} | {content_type} ({format_size(size_bytes)})"
    )


def log_upload_rejected(
    logger: logging.Logger,
    filename: str,
    content_type: str,
    skipped: bool = False,
) -> None:
    """Log a part refused by the allow-list."""
    action = "skipped" if skipped else "aborting"
    logger.warning(f"[upload.rejected] {filename} | type {content_type} not allowed, {action}")


def log_upload_failed(logger: logging.Logger, filename: str | None, error: Exception) -> None:
    """Log a failed ingestion call."""
    name = filename or "-"
    logger.error(f"[upload.failed] {name} | {type(error).__name__}: {error}")


def log_ingest_completed(
    logger: logging.Logger,
    files_count: int,
    total_bytes: int,
    start_time: float,
) -> None:
    """Log a finished ingestion call with totals."""
    duration_ms = int((time.time() - start_time) * 1000)
    logger.info(
        f"[upload.completed] {files_count} file(s), {format_size(total_bytes)} "
        f"({format_duration(duration_ms)})"
    )
