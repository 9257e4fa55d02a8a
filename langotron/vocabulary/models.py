"""Data models for vocabulary entries.

Entries are immutable: every mutation builds a replacement with
:meth:`WordEntry.replace` so readers never observe a half-updated entry.
The dictionary form keeps the field names used by the seed files and the
browser client (``alternative_translations``, ``other_forms``, ``q&a``).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from langotron.errors import MalformedEntryError

from .normalization import normalize_token

WORD_LEVELS: Tuple[str, ...] = ("1", "2", "3", "4")
DEFAULT_WORD_LEVEL = "2"
DEFAULT_WORD_TYPE = "Vocabulary"
QA_FIELD = "q&a"


def coerce_level(value: Any) -> str:
    """Return ``value`` as a known level, falling back to the default tier."""

    if value is None or isinstance(value, bool):
        return DEFAULT_WORD_LEVEL
    text = str(value).strip()
    return text if text in WORD_LEVELS else DEFAULT_WORD_LEVEL


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _mappings(value: Any) -> Iterable[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return ()
    return [item for item in value if isinstance(item, Mapping)]


@dataclass(frozen=True, slots=True)
class WordExample:
    """A sentence using the word together with its translation."""

    example: str
    translation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"example": self.example, "translation": self.translation}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordExample":
        return cls(
            example=_text(data.get("example") or data.get("sentence")),
            translation=_text(data.get("translation")),
        )


def _examples(value: Any) -> Tuple[WordExample, ...]:
    return tuple(WordExample.from_dict(item) for item in _mappings(value))


@dataclass(frozen=True, slots=True)
class WordVariant:
    """An alternative translation or another morphological form of a word."""

    word: str
    examples: Tuple[WordExample, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "examples": [item.to_dict() for item in self.examples]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordVariant":
        return cls(
            word=_text(data.get("word") or data.get("label")),
            examples=_examples(data.get("examples")),
        )


@dataclass(frozen=True, slots=True)
class SimilarWord:
    """A related vocabulary item with its own level."""

    word: str
    level: str = DEFAULT_WORD_LEVEL
    examples: Tuple[WordExample, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "level": self.level,
            "examples": [item.to_dict() for item in self.examples],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimilarWord":
        return cls(
            word=_text(data.get("word")),
            level=coerce_level(data.get("level")),
            examples=_examples(data.get("examples")),
        )


@dataclass(frozen=True, slots=True)
class WordQA:
    """A question asked about a word and the answer it received."""

    question: str
    answer: str

    def to_dict(self) -> Dict[str, Any]:
        # Stored data uses the historical "qestions" spelling.
        return {"qestions": self.question, "answer": self.answer}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordQA":
        question = data.get("qestions")
        if question is None:
            question = data.get("question")
        return cls(question=_text(question), answer=_text(data.get("answer")))


@dataclass(frozen=True, slots=True)
class WordEntry:
    """A learnable vocabulary item."""

    word: str
    """Canonical surface form."""

    translation: str
    """Primary gloss in the learner's base language."""

    examples: Tuple[WordExample, ...] = ()
    alternative_translations: Tuple[WordVariant, ...] = ()
    similar_words: Tuple[SimilarWord, ...] = ()
    other_forms: Tuple[WordVariant, ...] = ()
    level: str = DEFAULT_WORD_LEVEL
    learned: bool = False
    type: str = DEFAULT_WORD_TYPE
    category: str = ""
    notes: str = ""
    qa_log: Tuple[WordQA, ...] = ()

    @property
    def key(self) -> str:
        """Normalized lookup key derived from :attr:`word`."""

        return normalize_token(self.word)

    def replace(self, **changes: Any) -> "WordEntry":
        """Return a copy of this entry with ``changes`` applied."""

        if "level" in changes:
            changes["level"] = coerce_level(changes["level"])
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""

        return {
            "word": self.word,
            "translation": self.translation,
            "examples": [item.to_dict() for item in self.examples],
            "alternative_translations": [item.to_dict() for item in self.alternative_translations],
            "similar_words": [item.to_dict() for item in self.similar_words],
            "other_forms": [item.to_dict() for item in self.other_forms],
            "level": self.level,
            "learned": self.learned,
            "type": self.type,
            "category": self.category,
            "notes": self.notes,
            QA_FIELD: [item.to_dict() for item in self.qa_log],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordEntry":
        """Create an entry from raw data, filling defaults for missing fields.

        This never rejects input; use :func:`validate_word_entry` where an
        empty word or translation must be refused.
        """

        qa_source = data.get(QA_FIELD)
        if qa_source is None:
            qa_source = data.get("qa_log")
        return cls(
            word=_text(data.get("word")),
            translation=_text(data.get("translation")),
            examples=_examples(data.get("examples")),
            alternative_translations=tuple(
                WordVariant.from_dict(item) for item in _mappings(data.get("alternative_translations"))
            ),
            similar_words=tuple(
                SimilarWord.from_dict(item) for item in _mappings(data.get("similar_words"))
            ),
            other_forms=tuple(
                WordVariant.from_dict(item) for item in _mappings(data.get("other_forms"))
            ),
            level=coerce_level(data.get("level")),
            learned=data.get("learned") is True,
            type=_text(data.get("type")) or DEFAULT_WORD_TYPE,
            category=_text(data.get("category")),
            notes=_text(data.get("notes")),
            qa_log=tuple(WordQA.from_dict(item) for item in _mappings(qa_source)),
        )


def validate_word_entry(data: Any) -> WordEntry:
    """Build a :class:`WordEntry` from ``data`` and reject incomplete entries.

    Raises:
        MalformedEntryError: When ``data`` is not an object or lacks a word
            or translation after defaulting.
    """

    if isinstance(data, WordEntry):
        entry = data
    elif isinstance(data, Mapping):
        entry = WordEntry.from_dict(data)
    else:
        raise MalformedEntryError("Vocabulary entry must be a JSON object.")
    if not entry.word or not entry.translation:
        raise MalformedEntryError("Generated entry is missing required fields.")
    return entry


def entries_from_payload(payload: Any) -> List[WordEntry]:
    """Return entries parsed from a JSON list, skipping non-object items."""

    return [WordEntry.from_dict(item) for item in _mappings(payload)]


def merge_entry_updates(entry: WordEntry, updates: Mapping[str, Any]) -> WordEntry:
    """Apply a partial dictionary update on top of ``entry`` and re-validate."""

    merged = entry.to_dict()
    merged.update({key: value for key, value in updates.items() if value is not None})
    return validate_word_entry(merged)


def find_level(value: Optional[str]) -> Optional[str]:
    """Return ``value`` when it names a known level, otherwise ``None``."""

    if value is None:
        return None
    text = str(value).strip()
    return text if text in WORD_LEVELS else None


__all__ = [
    "DEFAULT_WORD_LEVEL",
    "QA_FIELD",
    "SimilarWord",
    "WORD_LEVELS",
    "WordEntry",
    "WordExample",
    "WordQA",
    "WordVariant",
    "coerce_level",
    "entries_from_payload",
    "find_level",
    "merge_entry_updates",
    "validate_word_entry",
]
