"""File-backed per-level vocabulary collections."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from langotron import logging_manager as log_mgr
from langotron.errors import WordConflictError, WordNotFoundError
from langotron.vocabulary.matcher import SearchOptions, search_entries
from langotron.vocabulary.models import (
    WordEntry,
    entries_from_payload,
    find_level,
    merge_entry_updates,
    validate_word_entry,
)
from langotron.vocabulary.normalization import normalize_token

logger = log_mgr.get_logger().getChild("services.word_service")

LEVEL_FILE_TEMPLATE = "level-{level}.json"


def _word_key(word: str) -> str:
    return normalize_token(word) or (word or "").strip().lower()


def _entry_key(entry: WordEntry) -> str:
    return entry.key or entry.word.lower()


def _require_level(level: str) -> str:
    resolved = find_level(level)
    if resolved is None:
        raise ValueError(f"Invalid level {level!r}. Must be 1, 2, 3, or 4.")
    return resolved


class WordRepository:
    """Read and write ``level-N.json`` files for one learning language.

    Each file holds a JSON list of entries sorted by word. Writes go through a
    temporary file so a crash never leaves a truncated collection behind.
    """

    def __init__(self, data_dir: Path, language: str = "id") -> None:
        self._root = Path(data_dir)
        self._language = language
        self._lock = threading.RLock()

    @property
    def language(self) -> str:
        return self._language

    @property
    def language_dir(self) -> Path:
        return self._root / self._language

    def level_path(self, level: str) -> Path:
        return self.language_dir / LEVEL_FILE_TEMPLATE.format(level=_require_level(level))

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------
    def _read_level(self, level: str) -> List[WordEntry]:
        path = self.level_path(level)
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return []
        if not isinstance(payload, list):
            logger.warning(
                "Ignoring word file %s: expected a JSON list",
                path,
                extra={"event": "word_service.file.invalid", "language": self._language},
            )
            return []
        return entries_from_payload(payload)

    def _write_level(self, level: str, entries: List[WordEntry]) -> None:
        path = self.level_path(level)
        path.parent.mkdir(parents=True, exist_ok=True)
        ordered = sorted(entries, key=lambda entry: entry.word.casefold())
        text = json.dumps([entry.to_dict() for entry in ordered], ensure_ascii=False, indent=2) + "\n"
        temp_path: Optional[Path] = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, delete=False
            ) as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
                temp_path = Path(handle.name)
            os.replace(temp_path, path)
        except Exception:
            if temp_path is not None:
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise
        logger.debug(
            "Wrote %s entries to %s",
            len(ordered),
            path,
            extra={"event": "word_service.file.written", "language": self._language},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_words(self, level: str) -> List[WordEntry]:
        """Return every entry stored for ``level`` in file order."""

        with self._lock:
            return self._read_level(level)

    def get_word(self, level: str, word: str) -> Optional[WordEntry]:
        """Return the entry in ``level`` whose normalized word matches ``word``."""

        target = _word_key(word)
        if not target:
            return None
        for entry in self.get_words(level):
            if _entry_key(entry) == target:
                return entry
        return None

    def search_words(self, query: str, options: Optional[SearchOptions] = None) -> List[WordEntry]:
        """Search the level files in ascending order, reading each at most once."""

        return search_entries(query, self.get_words, options)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_word(self, level: str, payload: Union[WordEntry, Mapping[str, Any]]) -> WordEntry:
        """Add a new entry to ``level``.

        Raises:
            WordConflictError: When an entry with the same key already exists.
            MalformedEntryError: When ``payload`` lacks a word or translation.
        """

        entry = validate_word_entry(payload)
        with self._lock:
            entries = self._read_level(level)
            if any(_entry_key(existing) == _entry_key(entry) for existing in entries):
                raise WordConflictError(f'Word "{entry.word}" already exists in level {level}')
            entries.append(entry)
            self._write_level(level, entries)
        logger.info(
            "Created word %s in level %s",
            entry.word,
            level,
            extra={"event": "word_service.word.created", "word_key": _entry_key(entry)},
        )
        return entry

    def update_word(self, level: str, word: str, updates: Mapping[str, Any]) -> WordEntry:
        """Merge ``updates`` into the entry for ``word`` and return the result."""

        target = _word_key(word)
        with self._lock:
            entries = self._read_level(level)
            for position, existing in enumerate(entries):
                if target and _entry_key(existing) == target:
                    break
            else:
                raise WordNotFoundError(f'Word "{word}" was not found in level {level}')
            updated = merge_entry_updates(existing, updates)
            entries[position] = updated
            self._write_level(level, entries)
        return updated

    def delete_word(self, level: str, word: str) -> None:
        """Remove the entry for ``word`` from ``level``."""

        target = _word_key(word)
        with self._lock:
            entries = self._read_level(level)
            remaining = [entry for entry in entries if _entry_key(entry) != target]
            if not target or len(remaining) == len(entries):
                raise WordNotFoundError(f'Word "{word}" was not found in level {level}')
            self._write_level(level, remaining)
        logger.info(
            "Deleted word %s from level %s",
            word,
            level,
            extra={"event": "word_service.word.deleted", "word_key": target},
        )


__all__ = ["LEVEL_FILE_TEMPLATE", "WordRepository"]
