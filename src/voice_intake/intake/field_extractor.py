"""
Field extractor for spoken patient intake.

This module provides:
1. An ordered table of pattern rules for name, phone and address
2. Rule evaluation with per-field short-circuiting
3. parse_transcript() - normalize, extract and apply fallback defaults

Rules are written against normalize() output (lowercase, no punctuation).
A transcript that matches no rule is not an error; every field is simply left
unset and later defaulted.
"""

import logging
import re
from dataclasses import replace
from typing import Callable, NamedTuple

from voice_intake.intake.intake_types import CandidateRecord, apply_defaults
from voice_intake.intake.normalizer import normalize
from voice_intake.intake.spoken_digits import has_letters, words_to_digits

logger = logging.getLogger(__name__)

PHONE_TRIGGERS = (
    "phone number is",
    "my phone number is",
    "my number is",
    "contact number is",
    "call me at",
)
ADDRESS_TRIGGERS = (
    "my address is",
    "address is",
    "i live at",
    "i live in",
)

FULL_NAME_PATTERN = re.compile(r"my name is\s+([a-z]+)\s+([a-z]+)")
FIRST_NAME_PATTERN = re.compile(r"first name is\s+([a-z]+)")
LAST_NAME_PATTERN = re.compile(r"last name is\s+([a-z]+)")
PHONE_PATTERN = re.compile(
    r"(?:" + "|".join(PHONE_TRIGGERS) + r")[\s,:-]*([0-9()\s-]+)"
)
# Lazy capture stops at the first "and"; "smith and sons street" truncates.
# Whole word only: "sandy" and "anderson" do not end the address, keep the \b.
ADDRESS_PATTERN = re.compile(
    r"(?:" + "|".join(ADDRESS_TRIGGERS) + r")[\s,:-]*([a-z0-9\s]+?)(?=\s*(?:\band\b|$))"
)

PHONE_DIGITS = 10

Fields = dict[str, str | None]


class FieldRule(NamedTuple):
    """One extraction rule: which fields it resolves and how."""

    name: str
    fields: tuple[str, ...]
    pattern: re.Pattern
    apply: Callable[[re.Match], Fields]


def capitalize(word: str) -> str:
    """First character upper, rest lower."""
    return word[:1].upper() + word[1:].lower()


def title_case_words(text: str) -> str:
    """Capitalize every space-separated word and join with single spaces."""
    return " ".join(capitalize(w) for w in text.split(" ") if w)


def clean_address(text: str) -> str:
    """Drop commas and collapse whitespace."""
    return re.sub(r"\s+", " ", text.replace(",", "")).strip()


def format_phone_digits(raw: str) -> str | None:
    """
    Reduce a phone capture to DDD-DDD-DDDD.

    Extra digits past the tenth are dropped. Fewer than ten digits gives
    None rather than a partial number.
    """
    digits = re.sub(r"[^0-9]", "", raw)
    if len(digits) < PHONE_DIGITS:
        return None
    digits = digits[:PHONE_DIGITS]
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def _full_name(match: re.Match) -> Fields:
    return {
        "first_name": capitalize(match.group(1)),
        "last_name": capitalize(match.group(2)),
    }


def _first_name(match: re.Match) -> Fields:
    return {"first_name": capitalize(match.group(1))}


def _last_name(match: re.Match) -> Fields:
    return {"last_name": capitalize(match.group(1))}


def _phone(match: re.Match) -> Fields:
    return {"phone_number": format_phone_digits(match.group(1))}


def _address(match: re.Match) -> Fields:
    return {"address": title_case_words(clean_address(match.group(1).strip()))}


# Most specific first: the split name rules only run for fields the full-name
# rule did not resolve.
FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("full_name", ("first_name", "last_name"), FULL_NAME_PATTERN, _full_name),
    FieldRule("first_name", ("first_name",), FIRST_NAME_PATTERN, _first_name),
    FieldRule("last_name", ("last_name",), LAST_NAME_PATTERN, _last_name),
    FieldRule("phone", ("phone_number",), PHONE_PATTERN, _phone),
    FieldRule("address", ("address",), ADDRESS_PATTERN, _address),
)


class FieldExtractor:
    """Applies the ordered field rules to normalized transcript text."""

    def __init__(
        self,
        rules: tuple[FieldRule, ...] = FIELD_RULES,
        spoken_digits: bool = False,
    ):
        """Initialize the extractor.

        Args:
            rules: Ordered rule table
            spoken_digits: Retry the phone rule with spelled-out digits
                converted when the numeric capture comes up short
        """
        self.rules = rules
        self.spoken_digits = spoken_digits

    def extract(self, normalized: str) -> CandidateRecord:
        """Run every rule over the text. Never raises."""
        values: Fields = {}
        resolved: set[str] = set()

        for rule in self.rules:
            if all(f in resolved for f in rule.fields):
                continue
            result = self._apply_rule(rule, normalized or "")
            if result is None:
                continue
            logger.debug("Rule %s matched: %s", rule.name, result)
            for field_name, value in result.items():
                if field_name not in resolved:
                    values[field_name] = value
                    resolved.add(field_name)

        return replace(CandidateRecord(), **values)

    def _apply_rule(self, rule: FieldRule, text: str) -> Fields | None:
        match = rule.pattern.search(text)
        if match is None:
            return None

        result = rule.apply(match)

        if (
            self.spoken_digits
            and "phone_number" in rule.fields
            and result.get("phone_number") is None
        ):
            tail = text[match.start(1):]
            if has_letters(tail):
                retry = rule.pattern.search(text[:match.start(1)] + words_to_digits(tail))
                if retry is not None:
                    result = rule.apply(retry)

        return result


_default_extractor = FieldExtractor()


def extract(normalized: str) -> CandidateRecord:
    """Extract a candidate record with the default rule table."""
    return _default_extractor.extract(normalized)


def parse_transcript(
    raw: str | None, extractor: FieldExtractor | None = None
) -> CandidateRecord:
    """
    Turn a raw transcript into a fully defaulted candidate record.

    Example:
        parse_transcript("My name is John Smith, call me at 555 123 4567")
        -> CandidateRecord("John", "Smith", "555-123-4567", "Unspecified")
    """
    cleaned = normalize(raw)
    logger.debug("Cleaned transcript: %r", cleaned)

    candidate = apply_defaults((extractor or _default_extractor).extract(cleaned))
    logger.debug(
        "Parsed phone=%s address=%s", candidate.phone_number, candidate.address
    )
    return candidate
