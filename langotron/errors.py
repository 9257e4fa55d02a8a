"""Common vocabulary exceptions."""

from __future__ import annotations


class LangotronError(RuntimeError):
    """Base class for errors raised by the vocabulary backend."""


class WordGenerationError(LangotronError):
    """Raised when the text generator fails to produce a usable result."""


class MalformedEntryError(WordGenerationError):
    """Raised when a vocabulary entry lacks its word or translation."""


class WordNotFoundError(LangotronError):
    """Raised when a mutation targets a word that is not stored."""


class WordConflictError(LangotronError):
    """Raised when creating a word that already exists in a level."""


__all__ = [
    "LangotronError",
    "MalformedEntryError",
    "WordConflictError",
    "WordGenerationError",
    "WordNotFoundError",
]
