"""
Tests for phone normalization.

Copyright (c) 2024 Cleansheet LLC
License: CC BY 4.0
"""

import pytest

from voice_intake.identity.phone import format_phone, is_matchable, normalize_phone


class TestNormalizePhone:
    """Tests for normalize_phone()."""

    def test_none_stays_none(self):
        """Test None is not turned into an empty string."""
        assert normalize_phone(None) is None

    @pytest.mark.parametrize(
        "raw",
        ["(555) 123-4567", "555-123-4567", "555.123.4567", "555 123 4567", "5551234567"],
    )
    def test_strips_non_digits(self, raw: str):
        """Test formatting characters are removed."""
        assert normalize_phone(raw) == "5551234567"

    def test_no_digits(self):
        """Test text without digits normalizes to an empty string."""
        assert normalize_phone("unlisted") == ""


class TestFormatPhone:
    """Tests for format_phone()."""

    def test_groups_ten_digits(self):
        """Test ten digits are shown as DDD-DDD-DDDD."""
        assert format_phone("5551234567") == "555-123-4567"

    def test_other_lengths_returned_as_digits(self):
        """Test non ten-digit numbers are not grouped."""
        assert format_phone("+1 555 123 4567") == "15551234567"

    def test_none(self):
        """Test None passes through."""
        assert format_phone(None) is None


class TestIsMatchable:
    """Tests for is_matchable()."""

    @pytest.mark.parametrize("normalized, expected", [("5551234567", True), ("", False), (None, False)])
    def test_matchable(self, normalized, expected: bool):
        """Test only non-empty digit strings identify a patient."""
        assert is_matchable(normalized) is expected
