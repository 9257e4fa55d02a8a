"""Application-level vocabulary state for one learning language."""

from __future__ import annotations

import json
import os
import tempfile
import threading
import time
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

from langotron import logging_manager as log_mgr
from langotron.errors import MalformedEntryError, WordNotFoundError

from .matcher import SearchOptions, VocabularyIndex
from .models import (
    DEFAULT_WORD_LEVEL,
    WordEntry,
    WordExample,
    WordQA,
    WordVariant,
    coerce_level,
    validate_word_entry,
)
from .normalization import normalize_token
from .tokenizer import clean_word_token

logger = log_mgr.get_logger().getChild("vocabulary.store")

STATE_FORMAT_VERSION = 1


class EntryGenerator(Protocol):
    """Text generator the store relies on for unknown words."""

    def generate_word_entry(
        self,
        base_word: str,
        *,
        level: str = DEFAULT_WORD_LEVEL,
        additional_context: Optional[str] = None,
    ) -> WordEntry:
        ...

    def ask_word_question(self, entry: WordEntry, question: str) -> str:
        ...

    def generate_example(self, entry: WordEntry) -> WordExample:
        ...


class LevelSource(Protocol):
    """Read access to the seeded per-level word collections."""

    def get_words(self, level: str) -> List[WordEntry]:
        ...


EntryRef = Union[str, WordEntry]


class WordStore:
    """Thread-safe vocabulary store with coalesced synthesis of unknown words.

    Entries are immutable; every mutation swaps a replacement into the index
    under the lock, then persists the whole index to ``state_path``.
    """

    def __init__(
        self,
        generator: EntryGenerator,
        *,
        seed_entries: Iterable[WordEntry] = (),
        state_path: Optional[Path] = None,
        language: str = "id",
    ) -> None:
        self._generator = generator
        self._language = language
        self._state_path = Path(state_path) if state_path is not None else None
        self._lock = threading.Lock()
        self._in_flight: Dict[str, Future] = {}
        self._index = VocabularyIndex()
        for entry in seed_entries:
            self._index_checked(entry, entry.key or entry.word.lower(), source="seed")
        self._merge_persisted_state()

    @classmethod
    def from_repository(
        cls,
        repository: LevelSource,
        generator: EntryGenerator,
        *,
        levels: Sequence[str] = ("1", "2", "3", "4"),
        state_path: Optional[Path] = None,
        language: str = "id",
    ) -> "WordStore":
        """Seed a store from every level of ``repository``."""

        seed: List[WordEntry] = []
        for level in levels:
            seed.extend(repository.get_words(level))
        return cls(generator, seed_entries=seed, state_path=state_path, language=language)

    @property
    def language(self) -> str:
        return self._language

    @property
    def state_path(self) -> Optional[Path]:
        return self._state_path

    def __len__(self) -> int:
        return len(self._index)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _index_checked(self, entry: WordEntry, key: str, *, source: str) -> bool:
        try:
            validate_word_entry(entry)
        except MalformedEntryError as exc:
            logger.warning(
                "Skipping %s vocabulary entry %r: %s",
                source,
                entry.word,
                exc,
                extra={"event": "vocabulary.entry.invalid", "language": self._language},
            )
            return False
        if not key:
            return False
        self._index.put(entry, key=key)
        return True

    def _merge_persisted_state(self) -> None:
        path = self._state_path
        if path is None or not path.exists():
            return
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "Ignoring unreadable vocabulary state at %s: %s",
                path,
                exc,
                extra={"event": "vocabulary.state.load_failed", "language": self._language},
            )
            return
        words = payload.get("words") if isinstance(payload, Mapping) else None
        if not isinstance(words, Mapping):
            return
        restored = 0
        for key, data in words.items():
            if not isinstance(data, Mapping):
                continue
            entry = WordEntry.from_dict(data)
            if self._index_checked(entry, str(key or "") or entry.key, source="state"):
                restored += 1
        logger.debug(
            "Restored %s persisted vocabulary entries from %s",
            restored,
            path,
            extra={"event": "vocabulary.state.loaded", "language": self._language},
        )

    def _persist_locked(self) -> None:
        path = self._state_path
        if path is None:
            return
        payload = {
            "version": STATE_FORMAT_VERSION,
            "words": {key: entry.to_dict() for key, entry in self._index.items()},
        }
        temp_path: Optional[Path] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, delete=False
            ) as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
                temp_path = Path(handle.name)
            os.replace(temp_path, path)
        except OSError as exc:
            if temp_path is not None:
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            logger.warning(
                "Failed to persist vocabulary state to %s: %s",
                path,
                exc,
                extra={"event": "vocabulary.state.save_failed", "language": self._language},
            )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def _lookup_locked(self, token: str) -> Optional[WordEntry]:
        found = self._index.find_exact(token)
        if found is None:
            # Words without a Latin key live under their lowercased surface form.
            fallback = clean_word_token((token or "").strip()).lower()
            found = self._index.get(fallback) if fallback else None
        return found

    def find_word(self, token: str) -> Optional[WordEntry]:
        """Return the stored entry for ``token`` without synthesising one."""

        with self._lock:
            return self._lookup_locked(token)

    def all_words(self) -> List[WordEntry]:
        with self._lock:
            return list(self._index)

    def learned_words(self) -> List[WordEntry]:
        with self._lock:
            return [entry for entry in self._index if entry.learned]

    def search(self, query: str, options: Optional[SearchOptions] = None) -> List[WordEntry]:
        with self._lock:
            snapshot = VocabularyIndex()
            for key, entry in self._index.items():
                snapshot.put(entry, key=key)
        return snapshot.search(query, options)

    # ------------------------------------------------------------------
    # Synthesis
    # ------------------------------------------------------------------
    def ensure_word(self, token: str, context: Optional[str] = None) -> WordEntry:
        """Return the entry for ``token``, generating and storing it when missing.

        Concurrent calls for the same normalized key share one generator
        request; every caller receives the same entry or the same exception.

        Raises:
            ValueError: When ``token`` has no letters.
            WordGenerationError: When the generator fails.
        """

        cleaned = clean_word_token((token or "").strip())
        if not cleaned:
            raise ValueError("Token must contain at least one letter.")
        key = normalize_token(cleaned) or cleaned.lower()

        with self._lock:
            existing = self._lookup_locked(cleaned)
            if existing is not None:
                return existing
            pending = self._in_flight.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._in_flight[key] = pending

        if not owner:
            logger.debug(
                "Joining in-flight generation for %s",
                cleaned,
                extra={"event": "vocabulary.ensure.coalesced", "word_key": key},
            )
            return pending.result()

        logger.info(
            "Generating vocabulary entry for %s",
            cleaned,
            extra={"event": "vocabulary.ensure.start", "word_key": key, "language": self._language},
        )
        start = time.perf_counter()
        try:
            with log_mgr.log_context(language=self._language, word_key=key):
                entry = validate_word_entry(
                    self._generator.generate_word_entry(
                        cleaned,
                        level=DEFAULT_WORD_LEVEL,
                        additional_context=context,
                    )
                )
            with self._lock:
                self._index.put(entry, key=entry.key or key)
                self._in_flight.pop(key, None)
                self._persist_locked()
        except BaseException as exc:
            with self._lock:
                self._in_flight.pop(key, None)
            pending.set_exception(exc)
            logger.warning(
                "Vocabulary generation failed for %s: %s",
                cleaned,
                exc,
                extra={"event": "vocabulary.ensure.failed", "word_key": key},
            )
            raise

        pending.set_result(entry)
        logger.info(
            "Stored generated entry %s",
            entry.word,
            extra={
                "event": "vocabulary.ensure.complete",
                "word_key": entry.key or key,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return entry

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def _update(self, ref: EntryRef, change: Callable[[WordEntry], WordEntry]) -> WordEntry:
        with self._lock:
            if isinstance(ref, WordEntry):
                key = self._index.key_of(ref) or ref.key
                current = self._index.get(key) if key else None
            else:
                current = self._lookup_locked(ref)
                key = self._index.key_of(current) if current is not None else None
            if current is None or not key:
                label = ref.word if isinstance(ref, WordEntry) else ref
                raise WordNotFoundError(f"Word '{label}' not found")
            updated = change(current)
            self._index.put(updated, key=key)
            self._persist_locked()
        return updated

    def upsert_word(self, entry: WordEntry) -> WordEntry:
        """Insert or replace ``entry`` under its own key.

        Raises:
            MalformedEntryError: When ``entry`` lacks a word or translation.
        """

        entry = validate_word_entry(entry)
        with self._lock:
            self._index.put(entry, key=entry.key or entry.word.lower())
            self._persist_locked()
        return entry

    def add_example(self, ref: EntryRef, example: Union[WordExample, Mapping[str, Any]]) -> WordEntry:
        item = example if isinstance(example, WordExample) else WordExample.from_dict(example)
        return self._update(ref, lambda entry: entry.replace(examples=entry.examples + (item,)))

    def add_alternative(
        self, ref: EntryRef, word: str, examples: Sequence[WordExample] = ()
    ) -> WordEntry:
        item = WordVariant(word=word.strip(), examples=tuple(examples))
        return self._update(
            ref,
            lambda entry: entry.replace(
                alternative_translations=entry.alternative_translations + (item,)
            ),
        )

    def add_other_form(
        self, ref: EntryRef, word: str, examples: Sequence[WordExample] = ()
    ) -> WordEntry:
        item = WordVariant(word=word.strip(), examples=tuple(examples))
        return self._update(ref, lambda entry: entry.replace(other_forms=entry.other_forms + (item,)))

    def toggle_learned(self, ref: EntryRef) -> WordEntry:
        return self._update(ref, lambda entry: entry.replace(learned=not entry.learned))

    def set_level(self, ref: EntryRef, level: Any) -> WordEntry:
        return self._update(ref, lambda entry: entry.replace(level=coerce_level(level)))

    def update_notes(self, ref: EntryRef, notes: str) -> WordEntry:
        return self._update(ref, lambda entry: entry.replace(notes=notes or ""))

    def add_qa(self, ref: EntryRef, question: str, answer: str) -> WordEntry:
        item = WordQA(question=question, answer=answer)
        return self._update(ref, lambda entry: entry.replace(qa_log=entry.qa_log + (item,)))

    def ask_ai(self, token: str, question: str) -> str:
        """Ask the generator about ``token`` and record the exchange."""

        entry = self.ensure_word(token)
        answer = self._generator.ask_word_question(entry, question)
        self.add_qa(entry, question, answer)
        return answer

    def generate_ai_example(self, token: str) -> WordExample:
        """Generate one more example for ``token`` and store it on the entry."""

        entry = self.ensure_word(token)
        example = self._generator.generate_example(entry)
        self.add_example(entry, example)
        return example


__all__ = ["EntryGenerator", "LevelSource", "STATE_FORMAT_VERSION", "WordStore"]
