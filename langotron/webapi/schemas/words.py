"""Schemas for vocabulary endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WordExamplePayload(BaseModel):
    """An example sentence and its translation."""

    example: str
    translation: str = ""


class WordVariantPayload(BaseModel):
    """An alternative translation or another form of a word."""

    word: str
    examples: List[WordExamplePayload] = Field(default_factory=list)


class SimilarWordPayload(BaseModel):
    word: str
    level: str = "2"
    examples: List[WordExamplePayload] = Field(default_factory=list)


class WordQAPayload(BaseModel):
    """A question about a word; serialized with the stored ``qestions`` key."""

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(alias="qestions")
    answer: str


class WordEntryPayload(BaseModel):
    """Full vocabulary entry as stored and returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    word: str
    translation: str
    examples: List[WordExamplePayload] = Field(default_factory=list)
    alternative_translations: List[WordVariantPayload] = Field(default_factory=list)
    similar_words: List[SimilarWordPayload] = Field(default_factory=list)
    other_forms: List[WordVariantPayload] = Field(default_factory=list)
    level: str = "2"
    learned: bool = False
    type: str = "Vocabulary"
    category: str = ""
    notes: str = ""
    qa: List[WordQAPayload] = Field(default_factory=list, alias="q&a")


class WordUpdateRequest(BaseModel):
    """Partial update for a stored vocabulary entry."""

    model_config = ConfigDict(populate_by_name=True)

    word: Optional[str] = None
    translation: Optional[str] = None
    examples: Optional[List[WordExamplePayload]] = None
    alternative_translations: Optional[List[WordVariantPayload]] = None
    similar_words: Optional[List[SimilarWordPayload]] = None
    other_forms: Optional[List[WordVariantPayload]] = None
    level: Optional[str] = None
    learned: Optional[bool] = None
    type: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    qa: Optional[List[WordQAPayload]] = Field(default=None, alias="q&a")

    def to_updates(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True, by_alias=True)


class SentenceWordsRequest(BaseModel):
    """Reading text plus the learned-paragraph flags from the client."""

    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = None
    learned_paragraphs: Dict[str, Any] = Field(default_factory=dict, alias="learnedParagraphs")


class SentenceRange(BaseModel):
    start: int
    end: int


class SentenceWordsResponse(BaseModel):
    """Known vocabulary for the next block of sentences."""

    model_config = ConfigDict(populate_by_name=True)

    words: List[WordEntryPayload] = Field(default_factory=list)
    message: Optional[str] = None
    sentence_range: SentenceRange = Field(alias="sentenceRange")
    total_sentences: int = Field(default=0, alias="totalSentences")
    next_sentences_count: int = Field(default=0, alias="nextSentencesCount")
    unique_words_found: int = Field(default=0, alias="uniqueWordsFound")
    total_unique_tokens: int = Field(default=0, alias="totalUniqueTokens")


class WordLookupResponse(BaseModel):
    """Result of resolving one tapped token against the vocabulary store."""

    token: str
    found: bool
    entry: Optional[WordEntryPayload] = None


class EnsureWordRequest(BaseModel):
    token: str
    context: Optional[str] = None


class VariantRequest(BaseModel):
    word: str
    examples: List[WordExamplePayload] = Field(default_factory=list)


class LevelRequest(BaseModel):
    level: str


class NotesRequest(BaseModel):
    notes: str = ""


class QuestionRequest(BaseModel):
    question: str


class AnswerResponse(BaseModel):
    answer: str
    entry: WordEntryPayload


class ExampleResponse(BaseModel):
    example: WordExamplePayload
    entry: WordEntryPayload


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
