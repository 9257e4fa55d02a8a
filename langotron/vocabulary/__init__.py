"""Word tokenization, normalization and fuzzy vocabulary matching.

Key Components:
    - normalize_token / strip_affixes: lookup keys for Indonesian words
    - tokenize_sentence: lossless sentence tokenization for tap-to-lookup
    - VocabularyIndex: keyed entries with exact and fuzzy search
    - WordStore: thread-safe store that synthesises unknown words once

Usage Example:
    from langotron.vocabulary import SearchOptions, VocabularyIndex, tokenize_sentence

    index = VocabularyIndex(entries)
    for token in tokenize_sentence("Saya belajar bahasa Indonesia."):
        entry = index.find_exact(token)

    matches = index.search("belajarnya", SearchOptions(levels=["1", "2"], limit=5))
"""

from .lookup_keys import build_lookup_keys, split_gloss
from .matcher import SearchOptions, VocabularyIndex, ensure_levels, entry_matches, search_entries
from .models import (
    DEFAULT_WORD_LEVEL,
    WORD_LEVELS,
    SimilarWord,
    WordEntry,
    WordExample,
    WordQA,
    WordVariant,
    coerce_level,
    entries_from_payload,
    find_level,
    merge_entry_updates,
    validate_word_entry,
)
from .normalization import candidate_keys, normalize_token, strip_affixes
from .store import WordStore
from .tokenizer import (
    clean_word_token,
    extract_candidate_words,
    is_word_like_token,
    iter_sentence_tokens,
    tokenize_sentence,
    word_keys_in_sentence,
)

__all__ = [
    "DEFAULT_WORD_LEVEL",
    "SearchOptions",
    "SimilarWord",
    "VocabularyIndex",
    "WORD_LEVELS",
    "WordEntry",
    "WordExample",
    "WordQA",
    "WordStore",
    "WordVariant",
    "build_lookup_keys",
    "candidate_keys",
    "clean_word_token",
    "coerce_level",
    "ensure_levels",
    "entries_from_payload",
    "entry_matches",
    "extract_candidate_words",
    "find_level",
    "is_word_like_token",
    "iter_sentence_tokens",
    "merge_entry_updates",
    "normalize_token",
    "search_entries",
    "split_gloss",
    "strip_affixes",
    "tokenize_sentence",
    "validate_word_entry",
    "word_keys_in_sentence",
]
