"""Vocabulary HTTP routes."""

from __future__ import annotations

import random
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from langotron.errors import (
    MalformedEntryError,
    WordConflictError,
    WordGenerationError,
    WordNotFoundError,
)
from langotron.services.sentence_words import collect_sentence_words
from langotron.services.word_service import WordRepository
from langotron.vocabulary.matcher import SearchOptions
from langotron.vocabulary.models import WORD_LEVELS, WordEntry, WordExample, find_level
from langotron.vocabulary.store import WordStore
from langotron.webapi.dependencies import get_word_repository, get_word_store
from langotron.webapi.schemas import (
    AnswerResponse,
    EnsureWordRequest,
    ExampleResponse,
    LevelRequest,
    NotesRequest,
    QuestionRequest,
    SentenceRange,
    SentenceWordsRequest,
    SentenceWordsResponse,
    VariantRequest,
    WordEntryPayload,
    WordExamplePayload,
    WordLookupResponse,
    WordUpdateRequest,
)

router = APIRouter(prefix="/api/words", tags=["words"])


def _require_level(level: str) -> str:
    resolved = find_level(level)
    if resolved is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid level. Must be 1, 2, 3, or 4.",
        )
    return resolved


def _parse_levels(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(WORD_LEVELS)
    return [token.strip() for token in raw.split(",") if token.strip()]


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=List[WordEntryPayload])
async def list_words(
    level: str = Query(default="1"),
    limit: Optional[int] = Query(default=None, ge=1),
    repository: WordRepository = Depends(get_word_repository),
):
    """Return the words of one level in random order for review."""

    entries = repository.get_words(_require_level(level))
    shuffled = random.sample(entries, len(entries))
    if limit:
        shuffled = shuffled[:limit]
    return [entry.to_dict() for entry in shuffled]


@router.get("/search", response_model=List[WordEntryPayload])
async def search_words(
    q: str = Query(default=""),
    levels: Optional[str] = Query(default=None),
    include_forms: bool = Query(default=True),
    include_learned: bool = Query(default=True),
    limit: Optional[int] = Query(default=None, ge=1),
    exact: bool = Query(default=False),
    repository: WordRepository = Depends(get_word_repository),
):
    """Search the level files, lowest level first."""

    options = SearchOptions(
        levels=_parse_levels(levels),
        include_forms=include_forms,
        include_learned=include_learned,
        limit=limit,
        exact=exact,
    )
    return [entry.to_dict() for entry in repository.search_words(q, options)]


@router.post("/from-sentences", response_model=SentenceWordsResponse)
async def words_from_sentences(
    payload: SentenceWordsRequest,
    repository: WordRepository = Depends(get_word_repository),
) -> SentenceWordsResponse:
    """Return known vocabulary for the next unread block of sentences."""

    if not payload.content or not payload.content.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content is required")

    result = collect_sentence_words(
        payload.content,
        payload.learned_paragraphs,
        repository.search_words,
    )
    return SentenceWordsResponse(
        words=[WordEntryPayload.model_validate(entry.to_dict()) for entry in result.words],
        message=result.message,
        sentence_range=SentenceRange(start=result.start, end=result.end),
        total_sentences=result.total_sentences,
        next_sentences_count=result.next_sentences_count,
        unique_words_found=result.unique_words_found,
        total_unique_tokens=result.total_unique_tokens,
    )


@router.get("/lookup/{token}", response_model=WordLookupResponse)
async def lookup_word(token: str, store: WordStore = Depends(get_word_store)):
    """Resolve a tapped token against the store without generating anything."""

    entry = store.find_word(token)
    return {
        "token": token,
        "found": entry is not None,
        "entry": entry.to_dict() if entry is not None else None,
    }


@router.post("/ensure", response_model=WordEntryPayload)
def ensure_word(payload: EnsureWordRequest, store: WordStore = Depends(get_word_store)):
    """Return the entry for a token, generating it when it is unknown."""

    try:
        entry = store.ensure_word(payload.token, payload.context)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except WordGenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return entry.to_dict()


@router.post("/{level}", response_model=WordEntryPayload, status_code=status.HTTP_201_CREATED)
async def create_word(
    level: str,
    payload: WordEntryPayload,
    repository: WordRepository = Depends(get_word_repository),
):
    """Add a word to a level file."""

    try:
        entry = repository.create_word(_require_level(level), payload.model_dump(by_alias=True))
    except WordConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except MalformedEntryError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return entry.to_dict()


@router.put("/{level}/{word}", response_model=WordEntryPayload)
async def update_word(
    level: str,
    word: str,
    payload: WordUpdateRequest,
    repository: WordRepository = Depends(get_word_repository),
):
    """Apply a partial update to a word in a level file."""

    try:
        entry = repository.update_word(_require_level(level), word, payload.to_updates())
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    except MalformedEntryError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return entry.to_dict()


@router.delete("/{level}/{word}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_word(
    level: str,
    word: str,
    repository: WordRepository = Depends(get_word_repository),
) -> None:
    """Remove a word from a level file."""

    try:
        repository.delete_word(_require_level(level), word)
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/store/{token}/examples", response_model=WordEntryPayload)
async def add_example(
    token: str,
    payload: WordExamplePayload,
    store: WordStore = Depends(get_word_store),
):
    try:
        entry = store.add_example(token, WordExample(payload.example, payload.translation))
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return entry.to_dict()


def _examples(payload: VariantRequest) -> List[WordExample]:
    return [WordExample(item.example, item.translation) for item in payload.examples]


@router.post("/store/{token}/alternatives", response_model=WordEntryPayload)
async def add_alternative(
    token: str,
    payload: VariantRequest,
    store: WordStore = Depends(get_word_store),
):
    try:
        entry = store.add_alternative(token, payload.word, _examples(payload))
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return entry.to_dict()


@router.post("/store/{token}/forms", response_model=WordEntryPayload)
async def add_other_form(
    token: str,
    payload: VariantRequest,
    store: WordStore = Depends(get_word_store),
):
    try:
        entry = store.add_other_form(token, payload.word, _examples(payload))
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return entry.to_dict()


@router.post("/store/{token}/learned", response_model=WordEntryPayload)
async def toggle_learned(token: str, store: WordStore = Depends(get_word_store)):
    try:
        entry = store.toggle_learned(token)
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return entry.to_dict()


@router.post("/store/{token}/level", response_model=WordEntryPayload)
async def set_level(
    token: str,
    payload: LevelRequest,
    store: WordStore = Depends(get_word_store),
):
    try:
        entry = store.set_level(token, payload.level)
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return entry.to_dict()


@router.post("/store/{token}/notes", response_model=WordEntryPayload)
async def update_notes(
    token: str,
    payload: NotesRequest,
    store: WordStore = Depends(get_word_store),
):
    try:
        entry = store.update_notes(token, payload.notes)
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return entry.to_dict()


def _stored_or_404(store: WordStore, token: str) -> WordEntry:
    entry = store.find_word(token)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Word '{token}' not found")
    return entry


@router.post("/store/{token}/ask", response_model=AnswerResponse)
def ask_about_word(
    token: str,
    payload: QuestionRequest,
    store: WordStore = Depends(get_word_store),
):
    """Ask a question about a stored word and keep the answer on the entry."""

    _stored_or_404(store, token)
    try:
        answer = store.ask_ai(token, payload.question)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except WordGenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return {"answer": answer, "entry": _stored_or_404(store, token).to_dict()}


@router.post("/store/{token}/generate-example", response_model=ExampleResponse)
def generate_example(token: str, store: WordStore = Depends(get_word_store)):
    """Generate one more example for a stored word."""

    _stored_or_404(store, token)
    try:
        example = store.generate_ai_example(token)
    except WordGenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except WordNotFoundError as exc:
        raise _not_found(exc) from exc
    return {"example": example.to_dict(), "entry": _stored_or_404(store, token).to_dict()}


__all__ = ["router"]
