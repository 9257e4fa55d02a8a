"""Shared fixtures for the Langotron test-suite."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from langotron.errors import WordGenerationError
from langotron.services.word_service import WordRepository
from langotron.vocabulary.models import WordEntry, WordExample


def build_entry(word: str, translation: str, **fields: Any) -> WordEntry:
    """Return a :class:`WordEntry` built from plain dictionaries."""

    payload: Dict[str, Any] = {"word": word, "translation": translation}
    payload.update(fields)
    return WordEntry.from_dict(payload)


@pytest.fixture
def make_entry() -> Callable[..., WordEntry]:
    return build_entry


class FakeGenerator:
    """In-memory stand-in for :class:`langotron.services.word_ai.WordGenerator`."""

    def __init__(
        self,
        entries: Optional[Dict[str, WordEntry]] = None,
        *,
        error: Optional[BaseException] = None,
        gate: Optional[threading.Event] = None,
    ) -> None:
        self.entries = dict(entries or {})
        self.error = error
        self.gate = gate
        self.calls: List[Dict[str, Any]] = []
        self.questions: List[str] = []
        self._lock = threading.Lock()

    def generate_word_entry(
        self,
        base_word: str,
        *,
        level: str = "2",
        additional_context: Optional[str] = None,
        **_kwargs: Any,
    ) -> WordEntry:
        with self._lock:
            self.calls.append(
                {"base_word": base_word, "level": level, "additional_context": additional_context}
            )
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        entry = self.entries.get(base_word)
        if entry is None:
            raise WordGenerationError(f"No fake entry for {base_word}")
        return entry

    def ask_word_question(self, entry: WordEntry, question: str) -> str:
        self.questions.append(question)
        return f"Jawaban tentang {entry.word}. Answer about {entry.word}."

    def generate_example(self, entry: WordEntry) -> WordExample:
        return WordExample(f"Contoh {entry.word}.", f"Example {entry.translation}.")


@pytest.fixture
def fake_generator_factory() -> Callable[..., FakeGenerator]:
    return FakeGenerator


SEED_LEVELS: Dict[str, List[WordEntry]] = {
    "1": [
        build_entry(
            "makan",
            "to eat",
            level="1",
            other_forms=[{"word": "makanan", "examples": []}],
            examples=[{"example": "Kami makan nasi.", "translation": "We eat rice."}],
        ),
        build_entry("buku", "book", level="1"),
        build_entry("minum", "to drink", level="1", learned=True),
    ],
    "2": [
        build_entry(
            "belajar",
            "to learn, to study",
            level="2",
            other_forms=[{"word": "pelajaran", "examples": []}],
        ),
        build_entry("bahasa", "language", level="2"),
    ],
    "3": [build_entry("kesempatan", "opportunity / chance", level="3")],
    "4": [],
}


@pytest.fixture
def seeded_repository(tmp_path: Path) -> WordRepository:
    """Return a repository whose level files hold :data:`SEED_LEVELS`."""

    repository = WordRepository(tmp_path / "words", "id")
    for level, entries in SEED_LEVELS.items():
        for entry in entries:
            repository.create_word(level, entry)
    return repository
