"""Supported learner languages and display helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import regex


@dataclass(frozen=True)
class Language:
    """A language the learner can write in or study."""

    code: str
    name: str


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("en", "English"),
    Language("id", "Indonesian"),
    Language("es", "Spanish"),
    Language("fr", "French"),
    Language("de", "German"),
    Language("ja", "Japanese"),
    Language("ko", "Korean"),
    Language("zh", "Chinese"),
    Language("pt", "Portuguese"),
    Language("it", "Italian"),
    Language("nl", "Dutch"),
    Language("ru", "Russian"),
    Language("ar", "Arabic"),
    Language("hi", "Hindi"),
    Language("th", "Thai"),
    Language("vi", "Vietnamese"),
)

_BY_CODE: Dict[str, Language] = {language.code: language for language in SUPPORTED_LANGUAGES}

# Language codes double as directory names for the per-language word files.
_CODE_PATTERN = regex.compile(r"^[a-z]{2,3}(?:-[a-z0-9]{2,8})?$")


def get_language(code: str) -> Optional[Language]:
    return _BY_CODE.get((code or "").strip().lower())


def get_language_name(code: str) -> str:
    """Return the English display name for ``code``, or ``code`` itself."""

    language = get_language(code)
    return language.name if language else code


def is_valid_language_code(code: str) -> bool:
    """Return whether ``code`` is safe to use as a storage directory name."""

    return bool(_CODE_PATTERN.match((code or "").strip().lower()))


__all__ = [
    "Language",
    "SUPPORTED_LANGUAGES",
    "get_language",
    "get_language_name",
    "is_valid_language_code",
]
