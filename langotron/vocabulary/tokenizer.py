"""Sentence tokenization for interactive vocabulary lookups.

Tokens alternate between word-like runs (letters, apostrophes, hyphens),
digit runs and everything else, so joining them always reproduces the input.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Set

import regex

from .normalization import normalize_token

SENTENCE_TOKEN_PATTERN = regex.compile(r"[\p{L}'-]+|[0-9]+|[^\p{L}0-9]+")
_LETTER_PATTERN = regex.compile(r"\p{L}")
_EDGE_NON_LETTERS = regex.compile(r"^[^\p{L}]+|[^\p{L}]+$")


def iter_sentence_tokens(sentence: str) -> Iterator[str]:
    """Yield the tokens of ``sentence`` in order without materialising them."""

    if not sentence:
        return
    for match in SENTENCE_TOKEN_PATTERN.finditer(sentence):
        yield match.group(0)


def tokenize_sentence(sentence: str) -> List[str]:
    """Split ``sentence`` into word-like and non-word tokens."""

    return list(iter_sentence_tokens(sentence))


def is_word_like_token(token: str) -> bool:
    """Return whether ``token`` contains at least one letter in any script."""

    return bool(token) and _LETTER_PATTERN.search(token) is not None


def clean_word_token(token: str) -> str:
    """Strip leading and trailing non-letters, keeping interior ``'`` and ``-``."""

    if not token:
        return ""
    return _EDGE_NON_LETTERS.sub("", token)


def extract_candidate_words(sentences: Iterable[str], *, min_length: int = 2) -> List[str]:
    """Return unique lowercase words from ``sentences`` in first-seen order.

    Args:
        sentences: Sentences to tokenize.
        min_length: Minimum cleaned word length to keep.

    Returns:
        Cleaned, lowercased word-like tokens without duplicates.
    """

    seen: Set[str] = set()
    words: List[str] = []
    for sentence in sentences:
        for token in iter_sentence_tokens(sentence):
            if not is_word_like_token(token):
                continue
            cleaned = clean_word_token(token).lower()
            if len(cleaned) < min_length or cleaned in seen:
                continue
            seen.add(cleaned)
            words.append(cleaned)
    return words


def word_keys_in_sentence(sentence: str) -> List[str]:
    """Return the normalized keys of the word-like tokens in ``sentence``."""

    keys: List[str] = []
    for token in iter_sentence_tokens(sentence):
        if not is_word_like_token(token):
            continue
        key = normalize_token(clean_word_token(token))
        if key:
            keys.append(key)
    return keys


__all__ = [
    "SENTENCE_TOKEN_PATTERN",
    "clean_word_token",
    "extract_candidate_words",
    "is_word_like_token",
    "iter_sentence_tokens",
    "tokenize_sentence",
    "word_keys_in_sentence",
]
