"""Tests for the OpenAI-compatible chat client."""

from __future__ import annotations

from typing import Any, List

import pytest
import requests

from langotron import config_manager as cfg
from langotron.llm_client import ClientSettings, LLMClient, create_client


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, responses: List[Any]) -> None:
        self._responses = list(responses)
        self.requests: List[dict] = []
        self.closed = False

    def post(self, url, *, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def _completion(text: str) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": text}}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17, "cost": "n/a"},
    }


def _client(session: _FakeSession, **overrides: Any) -> LLMClient:
    settings = ClientSettings(
        model="test-model",
        api_url="https://llm.invalid/v1/chat/completions",
        api_key="secret",
        site_url="http://localhost:3000",
        site_name="Indo Learning App",
    ).with_updates(**overrides)
    return LLMClient(settings, session=session)


def test_successful_request_parses_text_and_usage() -> None:
    session = _FakeSession([_FakeResponse(payload=_completion("Halo"))])
    client = _client(session)

    response = client.send_chat_request({"messages": []}, max_attempts=1)

    assert response.error is None
    assert response.text == "Halo"
    assert response.token_usage == {"prompt_tokens": 12, "completion_tokens": 5, "total_tokens": 17}
    sent = session.requests[0]
    assert sent["json"]["model"] == "test-model"
    assert sent["headers"]["Authorization"] == "Bearer secret"
    assert sent["headers"]["HTTP-Referer"] == "http://localhost:3000"
    assert sent["headers"]["X-Title"] == "Indo Learning App"
    assert sent["timeout"] == 60


def test_missing_api_key_short_circuits() -> None:
    session = _FakeSession([])
    client = _client(session, api_key=None)

    response = client.send_chat_request({"messages": []})

    assert response.error == "LLM API key is not configured"
    assert session.requests == []


def test_non_200_status_is_reported_after_retries() -> None:
    session = _FakeSession(
        [_FakeResponse(status_code=503, text="busy"), _FakeResponse(status_code=503, text="busy")]
    )
    client = _client(session)

    response = client.send_chat_request({"messages": []}, max_attempts=2, backoff_seconds=0)

    assert response.error == "HTTP 503: busy"
    assert len(session.requests) == 2


def test_retries_after_transport_error() -> None:
    session = _FakeSession(
        [requests.exceptions.ConnectionError("reset"), _FakeResponse(payload=_completion("Lagi"))]
    )
    client = _client(session)

    response = client.send_chat_request({"messages": []}, max_attempts=2, backoff_seconds=0)

    assert response.text == "Lagi"


def test_validator_rejection_and_empty_text_are_errors() -> None:
    session = _FakeSession(
        [_FakeResponse(payload=_completion("nope")), _FakeResponse(payload=_completion("  "))]
    )
    client = _client(session)

    rejected = client.send_chat_request(
        {"messages": []}, max_attempts=1, validator=lambda text: text.startswith("{")
    )
    empty = client.send_chat_request({"messages": []}, max_attempts=1)

    assert rejected.error == "Validation failed"
    assert empty.error == "Empty response"


def test_invalid_json_body_is_reported() -> None:
    session = _FakeSession([_FakeResponse(payload=ValueError("bad"), text="<html>")])
    client = _client(session)

    response = client.send_chat_request({"messages": []}, max_attempts=1)

    assert response.error.startswith("Invalid JSON response")


def test_context_manager_closes_session() -> None:
    session = _FakeSession([])

    with _client(session):
        pass

    assert session.closed is True


def test_create_client_uses_active_settings() -> None:
    settings = cfg.LangotronSettings(llm_model="configured-model", llm_api_key="from-config")

    client = create_client(settings=settings, session=_FakeSession([]))

    assert client.model == "configured-model"
    assert client.settings.api_key == "from-config"
    assert client.api_url == cfg.DEFAULT_LLM_API_URL


@pytest.mark.parametrize("model", [None, ""])
def test_create_client_falls_back_to_default_model(model) -> None:
    settings = cfg.LangotronSettings(llm_model="")

    client = create_client(model=model, settings=settings, session=_FakeSession([]))

    assert client.model == cfg.DEFAULT_MODEL
