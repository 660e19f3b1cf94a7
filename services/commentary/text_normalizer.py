"""Canonical form used to compare commentary lines for repetition."""

import re
from typing import Optional

_PUNCTUATION_RE = re.compile(r"[！!。．\s]")
# Longest first so "ですね" is not reduced to a dangling "ね".
_POLITE_ENDINGS_RE = re.compile(r"ようです|でしょう|ですね|です|ます")


def normalize(text: Optional[str]) -> str:
    """Strip punctuation, whitespace and polite sentence endings from text.

    Endings are removed until none remain, since dropping one can splice two
    halves of another together ("でですす" -> "です"). This keeps the function
    idempotent.
    """
    if not text:
        return ""
    result = _PUNCTUATION_RE.sub("", str(text))
    while True:
        stripped = _POLITE_ENDINGS_RE.sub("", result)
        if stripped == result:
            return result
        result = stripped


def is_repetition(candidate: Optional[str], previous: Optional[str]) -> bool:
    """Return True when two lines normalize to equal or nested text."""
    norm = normalize(candidate)
    last_norm = normalize(previous)
    if not norm or not last_norm:
        return False
    return norm == last_norm or last_norm in norm or norm in last_norm
