"""Tests for the LLM-backed vocabulary generation helpers."""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any

import pytest

from langotron.errors import MalformedEntryError, WordGenerationError
from langotron.llm_client import LLMResponse
from langotron.services import word_ai
from langotron.services.word_ai import (
    WordGenerator,
    ask_word_question,
    generate_example,
    generate_word_entry,
)
from langotron.vocabulary.models import WordEntry


def _entry_json(**overrides: Any) -> str:
    payload = {
        "word": "kucing",
        "translation": "cat",
        "examples": [{"example": "Kucing itu tidur.", "translation": "The cat sleeps."}],
        "alternative_translations": [],
        "other_forms": [{"word": "kucingnya", "examples": []}],
        "similar_words": [],
        "level": "1",
        "category": "Animals",
        "type": "Vocabulary",
        "notes": "",
    }
    payload.update(overrides)
    return json.dumps(payload)


class _FakeClient:
    def __init__(self, replies, model: str = "fake-model") -> None:
        self.model = model
        self._replies = list(replies)
        self.payloads: list[dict] = []

    def send_chat_request(self, payload, *, max_attempts=2, timeout=None, validator=None, backoff_seconds=1.0):
        self.payloads.append(payload)
        reply = self._replies.pop(0)
        if isinstance(reply, LLMResponse):
            return reply
        return LLMResponse(text=reply, status_code=200, token_usage={}, raw={"ok": True})

    def close(self) -> None:
        return


@pytest.fixture
def fake_llm(monkeypatch):
    """Patch ``create_client`` and return a callable that queues replies."""

    state: dict[str, Any] = {"replies": [], "models": [], "clients": []}

    @contextmanager
    def _fake_create_client(*, model=None, **_kwargs):
        state["models"].append(model)
        client = _FakeClient(state["replies"], model=model or "fake-model")
        state["replies"] = client._replies
        state["clients"].append(client)
        try:
            yield client
        finally:
            client.close()

    monkeypatch.setattr("langotron.services.word_ai.create_client", _fake_create_client)

    def _queue(*replies):
        state["replies"].extend(replies)
        return state

    return _queue


class TestGenerateWordEntry:
    def test_parses_entry_and_builds_prompt(self, fake_llm) -> None:
        state = fake_llm(_entry_json())

        entry = generate_word_entry("kucing", additional_context="Kucing itu lucu.")

        assert isinstance(entry, WordEntry)
        assert entry.word == "kucing"
        assert entry.other_forms[0].word == "kucingnya"
        payload = state["clients"][0].payloads[0]
        assert payload["temperature"] == word_ai.ENTRY_TEMPERATURE
        assert payload["messages"][0]["role"] == "system"
        user_prompt = payload["messages"][-1]["content"]
        assert "kucing" in user_prompt
        assert "Kucing itu lucu." in user_prompt

    def test_accepts_fenced_reply(self, fake_llm) -> None:
        fake_llm("```json\n" + _entry_json(word="anjing", translation="dog") + "\n```")

        assert generate_word_entry("anjing").translation == "dog"

    def test_accepts_reply_with_surrounding_text(self, fake_llm) -> None:
        fake_llm("Here is the entry:\n" + _entry_json() + "\nSemoga membantu!")

        assert generate_word_entry("kucing").word == "kucing"

    def test_model_override_reaches_the_client(self, fake_llm) -> None:
        state = fake_llm(_entry_json())

        generate_word_entry("kucing", model="  demo-model ")

        assert state["models"] == ["demo-model"]
        assert state["clients"][0].payloads[0]["model"] == "demo-model"

    def test_invalid_json_raises(self, fake_llm) -> None:
        fake_llm("kucing means cat")

        with pytest.raises(WordGenerationError, match="invalid JSON"):
            generate_word_entry("kucing")

    def test_incomplete_entry_raises_malformed(self, fake_llm) -> None:
        fake_llm(json.dumps({"word": "kucing"}))

        with pytest.raises(MalformedEntryError):
            generate_word_entry("kucing")

    def test_error_response_raises(self, fake_llm) -> None:
        fake_llm(LLMResponse(text="", status_code=0, token_usage={}, error="HTTP 503"))

        with pytest.raises(WordGenerationError, match="HTTP 503"):
            generate_word_entry("kucing")

    def test_empty_reply_raises(self, fake_llm) -> None:
        fake_llm("   ")

        with pytest.raises(WordGenerationError, match="empty"):
            generate_word_entry("kucing")

    def test_blank_word_is_rejected_before_any_request(self, fake_llm) -> None:
        state = fake_llm()

        with pytest.raises(ValueError):
            generate_word_entry("  ")
        assert state["clients"] == []


def test_ask_word_question_returns_answer(fake_llm, make_entry) -> None:
    state = fake_llm("Netral. Neutral.")

    answer = ask_word_question(make_entry("makan", "to eat"), "  Is it formal? ")

    assert answer == "Netral. Neutral."
    payload = state["clients"][0].payloads[0]
    assert payload["temperature"] == word_ai.ANSWER_TEMPERATURE
    assert "Is it formal?" in payload["messages"][-1]["content"]


def test_ask_word_question_rejects_blank_question(make_entry) -> None:
    with pytest.raises(ValueError):
        ask_word_question(make_entry("makan", "to eat"), " ")


class TestGenerateExample:
    def test_returns_example(self, fake_llm, make_entry) -> None:
        fake_llm(json.dumps({"example": "Saya makan nasi.", "translation": "I eat rice."}))

        example = generate_example(make_entry("makan", "to eat"))

        assert example.example == "Saya makan nasi."
        assert example.translation == "I eat rice."

    @pytest.mark.parametrize(
        "reply",
        ['["Saya makan nasi."]', json.dumps({"example": "Saya makan nasi."}), "no json"],
    )
    def test_rejects_unusable_replies(self, fake_llm, make_entry, reply: str) -> None:
        fake_llm(reply)

        with pytest.raises(WordGenerationError):
            generate_example(make_entry("makan", "to eat"))


def test_generator_uses_injected_factory(make_entry) -> None:
    clients = []

    @contextmanager
    def _factory(*, model=None, **_kwargs):
        client = _FakeClient([_entry_json()], model=model or "fake-model")
        clients.append(client)
        yield client

    generator = WordGenerator(
        client_factory=_factory,
        model="custom-model",
        learning_language="Indonesian",
        original_language="English",
    )

    entry = generator.generate_word_entry("kucing", additional_context="Ada kucing.")

    assert entry.translation == "cat"
    assert clients[0].model == "custom-model"
    assert "Ada kucing." in clients[0].payloads[0]["messages"][-1]["content"]
