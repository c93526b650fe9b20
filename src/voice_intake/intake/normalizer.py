"""
Transcript normalizer.

Flattens a raw speech transcript into the lowercase, punctuation-free form
the field extraction rules are written against.
"""

import re

PUNCTUATION_PATTERN = re.compile(r"[,.;!?]")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Applied in order over the whole string; later rewrites see earlier output.
PHRASE_REWRITES: tuple[tuple[str, str], ...] = (
    ("adress", "address"),
    ("live on", "live at"),
    ("adress is", "address is"),
)


def normalize(raw: str | None) -> str:
    """
    Normalize a transcript for rule matching.

    Example: normalize("My adress is 12 Oak St.") -> "my address is 12 oak st"

    Never raises; None or empty input gives an empty string.
    """
    if not raw:
        return ""

    text = raw.lower()
    text = PUNCTUATION_PATTERN.sub(" ", text)
    text = WHITESPACE_PATTERN.sub(" ", text)

    for phrase, replacement in PHRASE_REWRITES:
        text = text.replace(phrase, replacement)

    return text.strip()
