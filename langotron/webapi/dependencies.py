"""Dependency wiring for the FastAPI application."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import HTTPException, Query, status

from .. import config_manager as cfg
from .. import logging_manager as log_mgr
from ..languages import is_valid_language_code
from ..services.word_ai import WordGenerator
from ..services.word_service import WordRepository
from ..vocabulary.store import WordStore

logger = log_mgr.get_logger().getChild("webapi.dependencies")

STATE_FILE_TEMPLATE = "words-{language}.json"


def resolve_language(lang: Optional[str]) -> str:
    """Return the requested learning language or the configured default."""

    code = (lang or "").strip().lower()
    if not code:
        return cfg.get_settings().learning_language
    if not is_valid_language_code(code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid language code: {lang}",
        )
    return code


@lru_cache(maxsize=None)
def get_word_generator(language: str) -> WordGenerator:
    """Return the :class:`WordGenerator` that writes entries for ``language``."""

    return WordGenerator.from_settings(cfg.get_settings(), learning_language=language)


@lru_cache(maxsize=None)
def _repository_for(language: str) -> WordRepository:
    return WordRepository(cfg.get_settings().resolve_data_dir(), language)


@lru_cache(maxsize=None)
def _store_for(language: str) -> WordStore:
    settings = cfg.get_settings()
    state_path = settings.resolve_state_dir() / STATE_FILE_TEMPLATE.format(language=language)
    store = WordStore.from_repository(
        _repository_for(language),
        get_word_generator(language),
        state_path=state_path,
        language=language,
    )
    logger.info(
        "Loaded vocabulary store with %s entries",
        len(store),
        extra={"event": "webapi.store.loaded", "language": language},
    )
    return store


def get_word_repository(lang: Optional[str] = Query(default=None)) -> WordRepository:
    """Return the file-backed word repository for ``lang``."""

    return _repository_for(resolve_language(lang))


def get_word_store(lang: Optional[str] = Query(default=None)) -> WordStore:
    """Return the in-memory vocabulary store for ``lang``."""

    return _store_for(resolve_language(lang))


def reset_providers() -> None:
    """Drop cached repositories, stores and generators."""

    get_word_generator.cache_clear()
    _repository_for.cache_clear()
    _store_for.cache_clear()


__all__ = [
    "get_word_generator",
    "get_word_repository",
    "get_word_store",
    "reset_providers",
    "resolve_language",
]
