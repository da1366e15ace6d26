"""Random identifier helpers for stored file names."""

from __future__ import annotations

import os
import secrets

RANDOM_STRING_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+"
RANDOM_NAME_LENGTH = 25


def random_string(n: int) -> str:
    """Return ``n`` characters drawn uniformly from ``RANDOM_STRING_ALPHABET``.

    Uses the ``secrets`` CSPRNG so generated names cannot be predicted or
    enumerated. ``n <= 0`` yields an empty string.
    """
    if n <= 0:
        return ""
    return "".join(secrets.choice(RANDOM_STRING_ALPHABET) for _ in range(n))


def file_extension(filename: str) -> str:
    """Extension of the last path component, dot included and case preserved."""
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    _, ext = os.path.splitext(base)
    return ext


def new_file_name(original_name: str, length: int = RANDOM_NAME_LENGTH) -> str:
    """Build ``<random chars><original extension>`` for a renamed upload."""
    return f"{random_string(length)}{file_extension(original_name)}"
