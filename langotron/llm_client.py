"""Client for OpenAI-compatible chat completion endpoints such as OpenRouter."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

import requests

from langotron import config_manager as cfg
from langotron import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("llm")

TokenUsage = Dict[str, int]
Validator = Callable[[str], bool]


@dataclass(frozen=True)
class ClientSettings:
    """Immutable collection of configuration parameters for an :class:`LLMClient`."""

    model: str = cfg.DEFAULT_MODEL
    api_url: str = cfg.DEFAULT_LLM_API_URL
    api_key: Optional[str] = None
    site_url: Optional[str] = None
    site_name: Optional[str] = None
    timeout_seconds: int = 60
    debug: bool = False

    def with_updates(self, **updates: Any) -> "ClientSettings":
        """Return a copy of the settings with provided keyword overrides applied."""

        return replace(self, **updates)


@dataclass
class LLMResponse:
    """Container for responses returned by :class:`LLMClient.send_chat_request`."""

    text: str
    status_code: int
    token_usage: TokenUsage
    raw: Optional[Any] = None
    error: Optional[str] = None


class LLMClient:
    """Stateless helper for issuing chat completion requests."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._session = session or requests.Session()

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def model(self) -> str:
        return self._settings.model

    @property
    def api_url(self) -> str:
        return self._settings.api_url

    @property
    def debug_enabled(self) -> bool:
        return bool(self._settings.debug)

    # ------------------------------------------------------------------
    # Logging helpers
    # ------------------------------------------------------------------
    def _log_debug(self, message: str, *args: Any) -> None:
        if self.debug_enabled:
            logger.debug(message, *args)

    def _log_token_usage(self, usage: TokenUsage) -> None:
        if not usage:
            return
        self._log_debug(
            "Token usage - prompt: %s, completion: %s",
            usage.get("prompt_tokens", 0),
            usage.get("completion_tokens", 0),
        )

    # ------------------------------------------------------------------
    # Response parsing
    # ------------------------------------------------------------------
    def _extract_token_usage(self, data: Dict[str, Any]) -> TokenUsage:
        usage: TokenUsage = {}
        source = data.get("usage")
        if not isinstance(source, dict):
            return usage
        for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
            value = source.get(key)
            if isinstance(value, int):
                usage[key] = value
        return usage

    def _parse_json_response(self, response: requests.Response) -> LLMResponse:
        try:
            data = response.json()
        except ValueError as exc:
            return LLMResponse(
                text="",
                status_code=response.status_code,
                token_usage={},
                raw=response.text,
                error=f"Invalid JSON response: {exc}",
            )
        if not isinstance(data, dict):
            return LLMResponse(
                text="",
                status_code=response.status_code,
                token_usage={},
                raw=data,
                error="Unexpected response payload",
            )

        text = ""
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            first = choices[0] if isinstance(choices[0], dict) else {}
            message = first.get("message") or {}
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                text = content

        token_usage = self._extract_token_usage(data)
        self._log_token_usage(token_usage)
        return LLMResponse(
            text=text,
            status_code=response.status_code,
            token_usage=token_usage,
            raw=data,
        )

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------
    def _build_headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }
        if self._settings.site_url:
            headers["HTTP-Referer"] = self._settings.site_url
        if self._settings.site_name:
            headers["X-Title"] = self._settings.site_name
        return headers

    def _execute_request(
        self, payload: Dict[str, Any], *, timeout: Optional[int] = None
    ) -> LLMResponse:
        timeout = timeout or self._settings.timeout_seconds
        api_url = self.api_url
        self._log_debug("Dispatching LLM request to %s", api_url)
        self._log_debug("Payload: %s", json.dumps(payload, indent=2, ensure_ascii=False))

        response = self._session.post(
            api_url,
            json=payload,
            headers=self._build_headers(),
            timeout=timeout,
        )

        if response.status_code != 200:
            body_preview = response.text[:300]
            self._log_debug(
                "Received non-200 response: %s - %s",
                response.status_code,
                body_preview,
            )
            error_message = f"HTTP {response.status_code}"
            if body_preview:
                error_message = f"{error_message}: {body_preview}"
            return LLMResponse(
                text="",
                status_code=response.status_code,
                token_usage={},
                raw=response.text,
                error=error_message,
            )

        return self._parse_json_response(response)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def send_chat_request(
        self,
        payload: Dict[str, Any],
        *,
        max_attempts: int = 2,
        timeout: Optional[int] = None,
        validator: Optional[Validator] = None,
        backoff_seconds: float = 1.0,
    ) -> LLMResponse:
        """Send a chat request with retries and optional response validation.

        Failures never raise; the returned response carries ``error`` instead.
        """

        if not self._settings.api_key:
            return LLMResponse(
                text="",
                status_code=0,
                token_usage={},
                error="LLM API key is not configured",
            )

        working_payload = dict(payload)
        working_payload.setdefault("model", self.model)
        last_error: Optional[str] = None

        for attempt in range(1, max_attempts + 1):
            try:
                result = self._execute_request(working_payload, timeout=timeout)
            except requests.exceptions.RequestException as exc:
                last_error = str(exc)
                self._log_debug("Request error on attempt %s/%s: %s", attempt, max_attempts, exc)
                if attempt < max_attempts:
                    time.sleep(backoff_seconds * attempt)
                continue

            if result.error:
                last_error = result.error
                self._log_debug(
                    "LLM returned error on attempt %s/%s: %s",
                    attempt,
                    max_attempts,
                    result.error,
                )
            else:
                text = result.text.strip()
                if validator and not validator(text):
                    last_error = "Validation failed"
                    self._log_debug(
                        "Validator rejected response on attempt %s/%s",
                        attempt,
                        max_attempts,
                    )
                elif not text:
                    last_error = "Empty response"
                    self._log_debug("Empty response on attempt %s/%s", attempt, max_attempts)
                else:
                    return result

            if attempt < max_attempts:
                time.sleep(backoff_seconds * attempt)

        return LLMResponse(
            text="",
            status_code=0,
            token_usage={},
            raw=None,
            error=last_error,
        )

    def close(self) -> None:
        """Release any network resources associated with this client."""

        self._session.close()

    def __enter__(self) -> "LLMClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()


def create_client(
    *,
    model: Optional[str] = None,
    api_url: Optional[str] = None,
    api_key: Optional[str] = None,
    debug: Optional[bool] = None,
    session: Optional[requests.Session] = None,
    settings: Optional[cfg.LangotronSettings] = None,
) -> LLMClient:
    """Return a new :class:`LLMClient` configured from the active settings."""

    resolved = settings or cfg.get_settings()
    client_settings = ClientSettings(
        model=model or resolved.llm_model or cfg.DEFAULT_MODEL,
        api_url=api_url or resolved.llm_api_url or cfg.DEFAULT_LLM_API_URL,
        api_key=api_key or resolved.api_key_value(),
        site_url=resolved.site_url,
        site_name=resolved.site_name,
        timeout_seconds=resolved.llm_timeout_seconds,
        debug=resolved.debug if debug is None else debug,
    )
    return LLMClient(settings=client_settings, session=session)


__all__ = ["ClientSettings", "LLMClient", "LLMResponse", "create_client"]
