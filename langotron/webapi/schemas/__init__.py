"""Pydantic schemas for the FastAPI web backend."""

from __future__ import annotations

from .words import (
    AnswerResponse,
    EnsureWordRequest,
    ExampleResponse,
    LevelRequest,
    NotesRequest,
    QuestionRequest,
    SentenceRange,
    SentenceWordsRequest,
    SentenceWordsResponse,
    SimilarWordPayload,
    VariantRequest,
    WordEntryPayload,
    WordExamplePayload,
    WordLookupResponse,
    WordQAPayload,
    WordUpdateRequest,
    WordVariantPayload,
)

__all__ = [
    "AnswerResponse",
    "EnsureWordRequest",
    "ExampleResponse",
    "LevelRequest",
    "NotesRequest",
    "QuestionRequest",
    "SentenceRange",
    "SentenceWordsRequest",
    "SentenceWordsResponse",
    "SimilarWordPayload",
    "VariantRequest",
    "WordEntryPayload",
    "WordExamplePayload",
    "WordLookupResponse",
    "WordQAPayload",
    "WordUpdateRequest",
    "WordVariantPayload",
]
