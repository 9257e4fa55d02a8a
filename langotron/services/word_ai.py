"""LLM-backed generation of vocabulary entries, answers and examples."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from langotron import config_manager as cfg
from langotron import logging_manager as log_mgr
from langotron import prompt_templates
from langotron.errors import WordGenerationError
from langotron.languages import get_language_name
from langotron.llm_client import LLMClient, LLMResponse, create_client
from langotron.llm_json import parse_json_payload
from langotron.vocabulary.models import (
    DEFAULT_WORD_LEVEL,
    DEFAULT_WORD_TYPE,
    WordEntry,
    WordExample,
    validate_word_entry,
)

logger = log_mgr.get_logger().getChild("services.word_ai")

ClientFactory = Callable[..., LLMClient]

DEFAULT_CATEGORY = "General"
ENTRY_TEMPERATURE = 0.2
ANSWER_TEMPERATURE = 0.4
DEFAULT_LEARNING_LANGUAGE_NAME = "Indonesian"
DEFAULT_ORIGINAL_LANGUAGE_NAME = "English"


def _send(
    content: str,
    *,
    system_prompt: str,
    temperature: float,
    model: Optional[str],
    client_factory: Optional[ClientFactory],
    max_attempts: int,
    timeout_seconds: Optional[int],
) -> str:
    factory = client_factory or create_client
    with factory(model=(model or "").strip() or None) as client:
        payload = prompt_templates.make_chat_payload(
            content,
            model=client.model,
            system_prompt=system_prompt,
            temperature=temperature,
        )
        response: LLMResponse = client.send_chat_request(
            payload, max_attempts=max_attempts, timeout=timeout_seconds
        )

    if response.error:
        raise WordGenerationError(response.error)
    text = (response.text or "").strip()
    if not text:
        raise WordGenerationError("Model returned an empty response.")
    return text


def generate_word_entry(
    base_word: str,
    *,
    level: str = DEFAULT_WORD_LEVEL,
    category: str = DEFAULT_CATEGORY,
    word_type: str = DEFAULT_WORD_TYPE,
    translation_hint: Optional[str] = None,
    additional_context: Optional[str] = None,
    model: Optional[str] = None,
    temperature: float = ENTRY_TEMPERATURE,
    learning_language: str = DEFAULT_LEARNING_LANGUAGE_NAME,
    original_language: str = DEFAULT_ORIGINAL_LANGUAGE_NAME,
    client_factory: Optional[ClientFactory] = None,
    max_attempts: int = 2,
    timeout_seconds: Optional[int] = None,
) -> WordEntry:
    """Ask the model for a structured entry describing ``base_word``.

    Raises:
        WordGenerationError: On transport failure, an empty reply or invalid JSON.
        MalformedEntryError: When the reply parses but lacks a word or translation.
    """

    word = (base_word or "").strip()
    if not word:
        raise ValueError("Base word cannot be empty.")

    prompt = prompt_templates.make_word_entry_prompt(
        word,
        level=level,
        category=category,
        word_type=word_type,
        learning_language=learning_language,
        original_language=original_language,
        translation_hint=translation_hint,
        additional_context=additional_context,
    )
    text = _send(
        prompt,
        system_prompt=prompt_templates.word_entry_system_prompt(learning_language),
        temperature=temperature,
        model=model,
        client_factory=client_factory,
        max_attempts=max_attempts,
        timeout_seconds=timeout_seconds,
    )
    parsed = parse_json_payload(text)
    if parsed is None:
        raise WordGenerationError("Model returned invalid JSON.")
    return validate_word_entry(parsed)


def ask_word_question(
    entry: WordEntry,
    question: str,
    *,
    model: Optional[str] = None,
    learning_language: str = DEFAULT_LEARNING_LANGUAGE_NAME,
    original_language: str = DEFAULT_ORIGINAL_LANGUAGE_NAME,
    client_factory: Optional[ClientFactory] = None,
    max_attempts: int = 2,
    timeout_seconds: Optional[int] = None,
) -> str:
    """Return a short bilingual answer to ``question`` about ``entry``."""

    cleaned = (question or "").strip()
    if not cleaned:
        raise ValueError("Question cannot be empty.")
    return _send(
        prompt_templates.make_word_question_prompt(entry.to_dict(), cleaned),
        system_prompt=prompt_templates.word_question_system_prompt(
            learning_language, original_language
        ),
        temperature=ANSWER_TEMPERATURE,
        model=model,
        client_factory=client_factory,
        max_attempts=max_attempts,
        timeout_seconds=timeout_seconds,
    )


def generate_example(
    entry: WordEntry,
    *,
    model: Optional[str] = None,
    learning_language: str = DEFAULT_LEARNING_LANGUAGE_NAME,
    original_language: str = DEFAULT_ORIGINAL_LANGUAGE_NAME,
    client_factory: Optional[ClientFactory] = None,
    max_attempts: int = 2,
    timeout_seconds: Optional[int] = None,
) -> WordExample:
    """Return one new example sentence for ``entry``."""

    text = _send(
        prompt_templates.make_example_prompt(entry.word, entry.translation),
        system_prompt=prompt_templates.example_system_prompt(learning_language, original_language),
        temperature=ANSWER_TEMPERATURE,
        model=model,
        client_factory=client_factory,
        max_attempts=max_attempts,
        timeout_seconds=timeout_seconds,
    )
    parsed = parse_json_payload(text)
    if not isinstance(parsed, Mapping):
        raise WordGenerationError("Model returned invalid example JSON.")
    example = WordExample.from_dict(parsed)
    if not example.example or not example.translation:
        raise WordGenerationError("Generated example is missing required fields.")
    return example


class WordGenerator:
    """Bundle of generation calls sharing one model and language pair."""

    def __init__(
        self,
        *,
        client_factory: Optional[ClientFactory] = None,
        model: Optional[str] = None,
        learning_language: str = DEFAULT_LEARNING_LANGUAGE_NAME,
        original_language: str = DEFAULT_ORIGINAL_LANGUAGE_NAME,
        max_attempts: int = 2,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        self._client_factory = client_factory
        self._model = model
        self._learning_language = learning_language
        self._original_language = original_language
        self._max_attempts = max_attempts
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(
        cls,
        settings: Optional[cfg.LangotronSettings] = None,
        *,
        client_factory: Optional[ClientFactory] = None,
        learning_language: Optional[str] = None,
    ) -> "WordGenerator":
        resolved = settings or cfg.get_settings()
        return cls(
            client_factory=client_factory,
            model=resolved.llm_model,
            learning_language=get_language_name(learning_language or resolved.learning_language),
            original_language=get_language_name(resolved.original_language),
            max_attempts=resolved.llm_max_attempts,
            timeout_seconds=resolved.llm_timeout_seconds,
        )

    def _common(self) -> dict[str, Any]:
        return {
            "model": self._model,
            "learning_language": self._learning_language,
            "original_language": self._original_language,
            "client_factory": self._client_factory,
            "max_attempts": self._max_attempts,
            "timeout_seconds": self._timeout_seconds,
        }

    def generate_word_entry(
        self,
        base_word: str,
        *,
        level: str = DEFAULT_WORD_LEVEL,
        category: str = DEFAULT_CATEGORY,
        word_type: str = DEFAULT_WORD_TYPE,
        translation_hint: Optional[str] = None,
        additional_context: Optional[str] = None,
    ) -> WordEntry:
        logger.debug(
            "Requesting vocabulary entry for %s",
            base_word,
            extra={"event": "word_ai.entry.request"},
        )
        return generate_word_entry(
            base_word,
            level=level,
            category=category,
            word_type=word_type,
            translation_hint=translation_hint,
            additional_context=additional_context,
            **self._common(),
        )

    def ask_word_question(self, entry: WordEntry, question: str) -> str:
        return ask_word_question(entry, question, **self._common())

    def generate_example(self, entry: WordEntry) -> WordExample:
        return generate_example(entry, **self._common())


__all__ = [
    "WordGenerator",
    "ask_word_question",
    "generate_example",
    "generate_word_entry",
]
