"""Tests for the file-backed word repository."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from langotron.errors import MalformedEntryError, WordConflictError, WordNotFoundError
from langotron.services.word_service import WordRepository
from langotron.vocabulary.matcher import SearchOptions


def _read(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestReads:
    def test_missing_level_file_reads_as_empty(self, tmp_path: Path) -> None:
        repository = WordRepository(tmp_path, "id")

        assert repository.get_words("4") == []

    @pytest.mark.parametrize("level", ["0", "5", "x", ""])
    def test_invalid_level_raises(self, tmp_path: Path, level: str) -> None:
        with pytest.raises(ValueError):
            WordRepository(tmp_path, "id").get_words(level)

    def test_get_word_matches_by_normalized_key(self, seeded_repository: WordRepository) -> None:
        assert seeded_repository.get_word("1", "BUKU").word == "buku"
        assert seeded_repository.get_word("1", "kucing") is None
        assert seeded_repository.get_word("1", "???") is None

    def test_files_live_under_the_language_directory(self, seeded_repository: WordRepository) -> None:
        path = seeded_repository.level_path("1")

        assert path.parent.name == "id"
        assert path.name == "level-1.json"


class TestWrites:
    def test_create_word_sorts_and_appends_newline(self, tmp_path: Path) -> None:
        repository = WordRepository(tmp_path, "id")

        repository.create_word("1", {"word": "rumah", "translation": "house"})
        repository.create_word("1", {"word": "Air", "translation": "water"})

        text = repository.level_path("1").read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert [item["word"] for item in json.loads(text)] == ["Air", "rumah"]
        assert json.loads(text)[0]["learned"] is False
        assert list(repository.level_path("1").parent.glob("tmp*")) == []

    def test_duplicate_create_conflicts(self, seeded_repository: WordRepository) -> None:
        with pytest.raises(WordConflictError, match="already exists"):
            seeded_repository.create_word("1", {"word": "Buku", "translation": "book"})

    def test_create_rejects_incomplete_payload(self, seeded_repository: WordRepository) -> None:
        with pytest.raises(MalformedEntryError):
            seeded_repository.create_word("1", {"word": "meja"})

    def test_update_word_merges_fields(self, seeded_repository: WordRepository) -> None:
        updated = seeded_repository.update_word("2", "bahasa", {"notes": "Also 'tongue'.", "learned": True})

        assert updated.notes == "Also 'tongue'."
        assert updated.translation == "language"
        stored = _read(seeded_repository.level_path("2"))
        assert [item["learned"] for item in stored if item["word"] == "bahasa"] == [True]

    def test_update_missing_word(self, seeded_repository: WordRepository) -> None:
        with pytest.raises(WordNotFoundError, match="not found"):
            seeded_repository.update_word("2", "kucing", {"notes": "x"})

    def test_delete_word(self, seeded_repository: WordRepository) -> None:
        seeded_repository.delete_word("1", "minum")

        assert seeded_repository.get_word("1", "minum") is None
        with pytest.raises(WordNotFoundError):
            seeded_repository.delete_word("1", "minum")


class TestSearchWords:
    def test_searches_levels_in_order(self, seeded_repository: WordRepository) -> None:
        results = seeded_repository.search_words("belajarnya")

        assert [entry.word for entry in results] == ["belajar"]

    def test_limit_and_level_filter(self, seeded_repository: WordRepository) -> None:
        assert seeded_repository.search_words("buku", SearchOptions(levels=["2"])) == []
        limited = seeded_repository.search_words("to", SearchOptions(limit=2))
        assert len(limited) == 2
        assert all(entry.level == "1" for entry in limited)

    def test_levels_after_the_limit_are_not_read(
        self, seeded_repository: WordRepository, monkeypatch
    ) -> None:
        visited = []
        original = seeded_repository.get_words

        def _tracking(level: str):
            visited.append(level)
            return original(level)

        monkeypatch.setattr(seeded_repository, "get_words", _tracking)

        results = seeded_repository.search_words("buku", SearchOptions(limit=1))

        assert [entry.word for entry in results] == ["buku"]
        assert visited == ["1"]
