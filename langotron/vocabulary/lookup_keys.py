"""Lookup-key sets for vocabulary entries."""

from __future__ import annotations

import re
from typing import Iterable, Set

from .models import WordEntry
from .normalization import normalize_token, strip_affixes

_GLOSS_SEPARATORS = re.compile(r"[,/]")


def _add_keys(keys: Set[str], value: str) -> None:
    if not value:
        return
    normalized = normalize_token(value)
    if not normalized:
        return
    keys.add(normalized)
    keys.add(strip_affixes(normalized))


def split_gloss(value: str) -> Iterable[str]:
    """Split a translation such as ``"to learn / to study"`` into trimmed parts."""

    for part in _GLOSS_SEPARATORS.split(value or ""):
        trimmed = part.strip()
        if trimmed:
            yield trimmed


def build_lookup_keys(entry: WordEntry, include_forms: bool = True) -> Set[str]:
    """Return every normalized key that should resolve to ``entry``.

    The word itself and, when ``include_forms`` is set, its other forms and
    similar words contribute their normalized and affix-stripped keys. The
    translation, alternative translations and example translations are split
    on commas and slashes so that a base-language synonym also resolves here.
    """

    keys: Set[str] = set()
    _add_keys(keys, entry.word)
    if include_forms:
        for form in entry.other_forms:
            _add_keys(keys, form.word)
        for similar in entry.similar_words:
            _add_keys(keys, similar.word)

    gloss_sources = [entry.translation]
    gloss_sources.extend(item.word for item in entry.alternative_translations)
    gloss_sources.extend(item.translation for item in entry.examples)
    for source in gloss_sources:
        for part in split_gloss(source):
            _add_keys(keys, part)

    return keys


__all__ = ["build_lookup_keys", "split_gloss"]
