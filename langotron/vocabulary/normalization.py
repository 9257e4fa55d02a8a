"""Lookup-key normalization and Indonesian affix stripping.

Every vocabulary key is derived with :func:`normalize_token`; the affix
stripper then approximates the root so that ``belajarnya`` or
``belajarlah`` resolve to the ``belajar`` entry.
"""

from __future__ import annotations

import re
import unicodedata

# Scanned in this order within a pass; the first listed affix that fits wins.
NORMALIZED_SUFFIXES: tuple[str, ...] = ("lah", "kah", "nya", "kan", "pun", "ku", "mu", "an", "in")
NORMALIZED_PREFIXES: tuple[str, ...] = (
    "me",
    "mem",
    "men",
    "meng",
    "meny",
    "ber",
    "ter",
    "se",
    "ke",
    "pe",
    "pen",
    "peng",
    "per",
    "di",
)

# A removal must leave more than this many characters behind.
MIN_ROOT_LENGTH = 2

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")
_NON_ASCII_LETTERS = re.compile(r"[^a-z]")


def normalize_token(value: str) -> str:
    """Return the diacritic-free, lowercase ``a-z`` key for ``value``.

    Digits, punctuation and whitespace are dropped rather than replaced, so
    the result may be empty. An empty key means "no key".
    """

    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    without_marks = _COMBINING_MARKS.sub("", decomposed)
    return _NON_ASCII_LETTERS.sub("", without_marks.lower())


def strip_affixes(token: str) -> str:
    """Iteratively remove known suffixes and prefixes from a normalized token."""

    current = token or ""
    changed = True
    while changed:
        changed = False
        for suffix in NORMALIZED_SUFFIXES:
            if current.endswith(suffix) and len(current) - len(suffix) > MIN_ROOT_LENGTH:
                current = current[: -len(suffix)]
                changed = True
        for prefix in NORMALIZED_PREFIXES:
            if current.startswith(prefix) and len(current) - len(prefix) > MIN_ROOT_LENGTH:
                current = current[len(prefix) :]
                changed = True
    return current


def candidate_keys(value: str) -> list[str]:
    """Return the distinct non-empty lookup keys for ``value``.

    The normalized form comes first, followed by its stripped form when the
    two differ.
    """

    normalized = normalize_token(value)
    if not normalized:
        return []
    stripped = strip_affixes(normalized)
    if stripped == normalized:
        return [normalized]
    return [normalized, stripped]


__all__ = [
    "MIN_ROOT_LENGTH",
    "NORMALIZED_PREFIXES",
    "NORMALIZED_SUFFIXES",
    "candidate_keys",
    "normalize_token",
    "strip_affixes",
]
