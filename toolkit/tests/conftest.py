"""Shared fixtures for toolkit tests."""

from __future__ import annotations

import pytest

from toolkit.tests.factories import make_jpeg, make_png


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def upload_dir(tmp_path):
    """Existing, empty destination directory."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path
