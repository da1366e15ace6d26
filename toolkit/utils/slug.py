"""Slug generation for URL-safe identifiers."""

from __future__ import annotations

import re

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lower-case ``text`` and collapse every run of non ``[a-z0-9]`` characters into ``-``.

    Raises:
        ValueError: if ``text`` is empty or nothing slug-safe remains
    """
    if not text:
        raise ValueError("empty string not permitted")

    slug = _NON_SLUG_RE.sub("-", text.lower()).strip("-")
    if not slug:
        raise ValueError("after removing characters, slug is zero length")
    return slug
