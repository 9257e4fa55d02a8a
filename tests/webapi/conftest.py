"""Shared fixtures for WebAPI route tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from langotron.services.word_service import WordRepository
from langotron.vocabulary.store import WordStore
from langotron.webapi.application import create_app
from langotron.webapi.dependencies import get_word_repository, get_word_store


@pytest.fixture
def word_store(seeded_repository, fake_generator_factory, make_entry, tmp_path: Path) -> WordStore:
    generator = fake_generator_factory({"kucing": make_entry("kucing", "cat", level="1")})
    return WordStore.from_repository(
        seeded_repository,
        generator,
        state_path=tmp_path / "state" / "words-id.json",
    )


@pytest.fixture
def webapi_app(seeded_repository: WordRepository, word_store: WordStore) -> FastAPI:
    """Create a fresh FastAPI app wired to the seeded repository and store.

    Clears dependency overrides on teardown.
    """
    app = create_app()
    app.dependency_overrides[get_word_repository] = lambda: seeded_repository
    app.dependency_overrides[get_word_store] = lambda: word_store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(webapi_app: FastAPI) -> TestClient:
    with TestClient(webapi_app) as test_client:
        yield test_client
