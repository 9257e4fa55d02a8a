"""Vocabulary for the next block of unread sentences in a reading text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from langotron import logging_manager as log_mgr
from langotron.vocabulary.matcher import SearchOptions
from langotron.vocabulary.models import WORD_LEVELS, WordEntry
from langotron.vocabulary.normalization import normalize_token
from langotron.vocabulary.tokenizer import extract_candidate_words

logger = log_mgr.get_logger().getChild("services.sentence_words")

SearchFn = Callable[[str, SearchOptions], List[WordEntry]]

DEFAULT_BLOCK_SIZE = 10
NO_MORE_SENTENCES_MESSAGE = "No more sentences to learn"

_SENTENCE_BOUNDARY = re.compile(r"\.\s+|\.\n+")
_PARAGRAPH_KEY = re.compile(r"para-(\d+)")

SENTENCE_SEARCH_OPTIONS = SearchOptions(
    levels=WORD_LEVELS,
    include_forms=True,
    include_learned=True,
    limit=1,
    exact=False,
)


@dataclass(slots=True)
class SentenceWordsResult:
    """Words found in one block of sentences."""

    words: List[WordEntry]
    start: int
    end: int
    total_sentences: int = 0
    next_sentences_count: int = 0
    total_unique_tokens: int = 0
    message: Optional[str] = None

    @property
    def unique_words_found(self) -> int:
        return len(self.words)


def split_sentences(content: str) -> List[str]:
    """Split ``content`` on full stops followed by whitespace."""

    return [part.strip() + "." for part in _SENTENCE_BOUNDARY.split(content or "") if part.strip()]


def last_learned_index(learned_paragraphs: Optional[Mapping[str, Any]]) -> int:
    """Return the highest ``para-N`` index marked ``True``, or ``-1``."""

    if not isinstance(learned_paragraphs, Mapping):
        return -1
    indices: List[int] = []
    for key, learned in learned_paragraphs.items():
        if learned is not True:
            continue
        match = _PARAGRAPH_KEY.search(str(key))
        if match:
            indices.append(int(match.group(1)))
    return max(indices) if indices else -1


def collect_sentence_words(
    content: str,
    learned_paragraphs: Optional[Mapping[str, Any]],
    search: SearchFn,
    *,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> SentenceWordsResult:
    """Find known vocabulary in the sentences following the last learned one.

    Args:
        content: Full reading text.
        learned_paragraphs: Mapping of ``para-N`` keys to learned flags.
        search: Search callable, typically ``WordRepository.search_words``.
        block_size: Number of sentences to inspect.

    Returns:
        The matched entries, one per normalized word, with block statistics.
    """

    sentences = split_sentences(content)
    start = last_learned_index(learned_paragraphs) + 1
    block = sentences[start : start + block_size]

    if not block:
        return SentenceWordsResult(
            words=[],
            start=start,
            end=start,
            total_sentences=len(sentences),
            message=NO_MORE_SENTENCES_MESSAGE,
        )

    candidates = extract_candidate_words(block, min_length=2)
    found: Dict[str, WordEntry] = {}
    for word in candidates:
        try:
            results = search(word, SENTENCE_SEARCH_OPTIONS)
        except Exception as exc:
            logger.warning(
                "Error searching for word %r: %s",
                word,
                exc,
                extra={"event": "sentence_words.search_failed"},
            )
            continue
        if not results:
            continue
        match = results[0]
        found.setdefault(normalize_token(match.word), match)

    return SentenceWordsResult(
        words=list(found.values()),
        start=start,
        end=start + len(block),
        total_sentences=len(sentences),
        next_sentences_count=len(block),
        total_unique_tokens=len(candidates),
    )


__all__ = [
    "NO_MORE_SENTENCES_MESSAGE",
    "SentenceWordsResult",
    "collect_sentence_words",
    "last_learned_index",
    "split_sentences",
]
