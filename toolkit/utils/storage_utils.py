"""Local filesystem helpers for upload and download directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755


def create_dir_if_not_exist(path: str | os.PathLike, mode: int = DEFAULT_DIR_MODE) -> Path:
    """Create ``path`` (and parents) unless it already exists.

    Calling it again for an existing directory is a no-op.
    """
    directory = Path(path)
    if not directory.is_dir():
        directory.mkdir(mode=mode, parents=True, exist_ok=True)
        logger.debug(f"[storage.mkdir] {directory}")
    return directory


def resolve_inside(directory: str | os.PathLike, name: str) -> Path:
    """Join ``name`` onto ``directory`` and refuse paths that escape it.

    Raises:
        ValueError: if the resolved path is not inside ``directory``
    """
    root = Path(directory).resolve()
    target = (root / name).resolve()
    if target == root or root not in target.parents:
        raise ValueError(f"Path '{name}' escapes directory '{directory}'")
    return target
