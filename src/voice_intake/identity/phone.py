"""
Phone number helpers.

The digits-only form is the identity key for every deduplication decision.
"""

import re

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(raw: str | None) -> str | None:
    """Strip every non-digit character.

    None stays None so "no phone given" is distinguishable from a phone that
    parsed to an empty string.
    """
    if raw is None:
        return None
    return _NON_DIGITS.sub("", raw)


def format_phone(raw: str | None) -> str | None:
    """Display form DDD-DDD-DDDD for a ten-digit phone, else the digits as-is."""
    digits = normalize_phone(raw)
    if digits is None or len(digits) != 10:
        return digits
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def is_matchable(normalized: str | None) -> bool:
    """Whether a normalized phone can identify anyone.

    None and the empty string never match another record, not even each other.
    """
    return bool(normalized)
