"""Prompt templates used for communicating with the LLM."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from langotron import config_manager as cfg

WORD_ENTRY_SCHEMA_LINES = (
    "Return a single JSON object that matches this schema:",
    "{",
    '  "word": string,',
    '  "translation": string,',
    '  "examples": [{"example": string, "translation": string}] // 3-5 entries,',
    '  "alternative_translations": [{"word": string, "examples": [{"example": string, "translation": string}]}] // exactly 2 entries,',
    '  "similar_words": [{"word": string, "examples": [{"example": string, "translation": string}], "level": "1|2|3|4"}] // exactly 2 entries,',
    '  "other_forms": [{"word": string, "examples": [{"example": string, "translation": string}]}] // 2 entries,',
    '  "level": "1|2|3|4",',
    '  "learned": boolean,',
    '  "type": string,',
    '  "category": string,',
    '  "notes": string,',
    '  "q&a": [{"qestions": string, "answer": string}]',
    "}",
)


def _tutor(learning_language: str) -> str:
    article = "an" if learning_language[:1].lower() in "aeiou" else "a"
    return f"{article} {learning_language} language tutor"


def word_entry_system_prompt(learning_language: str) -> str:
    return f"You are {_tutor(learning_language)} who produces structured vocabulary entries for learners."


def make_word_entry_prompt(
    base_word: str,
    *,
    level: str,
    category: str,
    word_type: str,
    learning_language: str,
    original_language: str,
    translation_hint: Optional[str] = None,
    additional_context: Optional[str] = None,
) -> str:
    """Build the user prompt asking for one structured vocabulary entry."""

    instructions = list(WORD_ENTRY_SCHEMA_LINES)
    instructions.append(
        f"Use {learning_language} for example sentences and {original_language} for their translations."
    )
    instructions.append("Do not add commentary outside of the JSON object.")

    context = [
        f"Base word: {base_word}",
        f"Desired level: {level}",
        f"Category: {category}",
        f"Type: {word_type}",
    ]
    if translation_hint:
        context.append(f"{original_language} meaning hint: {translation_hint}")
    if additional_context:
        context.append(f"Extra context: {additional_context}")

    return "\n".join(instructions) + "\n\n" + "\n".join(context)


def word_question_system_prompt(learning_language: str, original_language: str) -> str:
    return (
        f"You are {_tutor(learning_language)}. Provide concise bilingual answers "
        f"({learning_language} first, {original_language} second)."
    )


def make_word_question_prompt(entry: Dict[str, Any], question: str) -> str:
    """Build the prompt for a free-form question about a vocabulary entry."""

    return "\n".join(
        [
            "Here is the vocabulary entry in JSON format:",
            json.dumps(entry, ensure_ascii=False, indent=2),
            "",
            f"Question: {question}",
            "Answer in 2-3 sentences. Mention cultural or usage notes if relevant.",
        ]
    )


def example_system_prompt(learning_language: str, original_language: str) -> str:
    return (
        f"You create short {learning_language} example sentences with "
        f"{original_language} translations."
    )


def make_example_prompt(word: str, meaning: str) -> str:
    return "\n".join(
        [
            'Produce exactly one JSON object {"example": string, "translation": string}.',
            f"Word: {word}",
            f"Meaning: {meaning}",
            "Keep it simple and relevant to daily life.",
            "No commentary outside JSON.",
        ]
    )


def make_chat_payload(
    content: str,
    *,
    model: Optional[str] = None,
    system_prompt: Optional[str] = None,
    temperature: Optional[float] = None,
    additional_messages: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, object]:
    """Build a chat payload using the configured defaults."""

    if model is None:
        model = cfg.DEFAULT_MODEL

    messages: List[Dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    if additional_messages:
        messages.extend(additional_messages)
    messages.append({"role": "user", "content": content})

    payload: Dict[str, object] = {"model": model, "messages": messages}
    if temperature is not None:
        payload["temperature"] = temperature
    return payload


__all__ = [
    "WORD_ENTRY_SCHEMA_LINES",
    "example_system_prompt",
    "make_chat_payload",
    "make_example_prompt",
    "make_word_entry_prompt",
    "make_word_question_prompt",
    "word_entry_system_prompt",
    "word_question_system_prompt",
]
