"""Tests for slug generation."""

import pytest

from toolkit.utils.slug import slugify


class TestSlugify:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("now is the time", "now-is-the-time"),
            ("  Now Is   The Time  ", "now-is-the-time"),
            (
                "NOW is the &*(^# time for & all & good &MEN + apple & poop 123",
                "now-is-the-time-for-all-good-men-apple-poop-123",
            ),
            ("hello こんにちは世界 world", "hello-world"),
        ],
    )
    def test_valid(self, text, expected):
        assert slugify(text) == expected

    def test_empty_string(self):
        with pytest.raises(ValueError, match="empty string"):
            slugify("")

    def test_nothing_slug_safe(self):
        with pytest.raises(ValueError, match="zero length"):
            slugify("こんにちは世界")
