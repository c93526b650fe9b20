"""
Spoken digit conversion.

Turns digits that were spelled out in speech ("five five five one two ...")
into numerals so the phone rule can capture them.
"""

import re

SPOKEN_DIGITS: dict[str, str] = {
    "zero": "0",
    "oh": "0",
    "one": "1",
    "two": "2",
    "to": "2",
    "too": "2",
    "three": "3",
    "four": "4",
    "for": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
}

_WORD_PATTERN = re.compile(r"\b(" + "|".join(SPOKEN_DIGITS) + r")\b")


def words_to_digits(text: str | None) -> str:
    """Replace whole spoken digit words with numerals.

    Only whole words are rewritten, so "someone" and "forty" are left alone.
    """
    if not text:
        return ""
    return _WORD_PATTERN.sub(lambda m: SPOKEN_DIGITS[m.group(1)], text.lower())


def has_letters(text: str) -> bool:
    """True if the text contains any alphabetic character."""
    return any(ch.isalpha() for ch in text)
