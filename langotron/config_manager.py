"""Layered configuration for the Langotron backend.

Values resolve in this order, later layers winning:

1. :class:`LangotronSettings` defaults
2. ``conf/config.json``
3. ``conf/config.local.json`` (or an explicit ``config_file``)
4. Environment variables (see :class:`EnvironmentOverrides`)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from langotron import logging_manager

MODULE_DIR = Path(__file__).resolve().parent
SCRIPT_DIR = MODULE_DIR.parent.resolve()
CONF_DIR = SCRIPT_DIR / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

DEFAULT_DATA_RELATIVE = Path("data") / "words"
DEFAULT_STATE_RELATIVE = Path("storage")
DEFAULT_LLM_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "openrouter/auto"
DEFAULT_SITE_URL = "http://localhost:3000"
DEFAULT_SITE_NAME = "Indo Learning App"
DEFAULT_LEARNING_LANGUAGE = "id"
DEFAULT_ORIGINAL_LANGUAGE = "en"

SENSITIVE_CONFIG_KEYS = {"llm_api_key"}

logger = logging_manager.get_logger().getChild("config")


class LangotronSettings(BaseModel):
    """Typed representation of the application configuration."""

    model_config = ConfigDict(extra="allow")

    data_dir: str = str(DEFAULT_DATA_RELATIVE)
    state_dir: str = str(DEFAULT_STATE_RELATIVE)
    learning_language: str = DEFAULT_LEARNING_LANGUAGE
    original_language: str = DEFAULT_ORIGINAL_LANGUAGE
    llm_api_url: str = DEFAULT_LLM_API_URL
    llm_model: str = DEFAULT_MODEL
    llm_api_key: Optional[SecretStr] = None
    llm_timeout_seconds: int = 60
    llm_max_attempts: int = 2
    site_url: str = DEFAULT_SITE_URL
    site_name: str = DEFAULT_SITE_NAME
    debug: bool = False

    def resolve_data_dir(self) -> Path:
        """Return the absolute directory holding the per-level word files."""

        return resolve_path(self.data_dir)

    def resolve_state_dir(self) -> Path:
        """Return the absolute directory holding persisted learner state."""

        return resolve_path(self.state_dir)

    def api_key_value(self) -> Optional[str]:
        if self.llm_api_key is None:
            return None
        return self.llm_api_key.get_secret_value() or None


class EnvironmentOverrides(BaseSettings):
    """Configuration overrides sourced from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    data_dir: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LANGOTRON_DATA_DIR")
    )
    state_dir: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LANGOTRON_STATE_DIR")
    )
    learning_language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LANGOTRON_LEARNING_LANGUAGE")
    )
    original_language: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("LANGOTRON_ORIGINAL_LANGUAGE")
    )
    llm_api_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("OPENROUTER_URL", "LANGOTRON_LLM_API_URL")
    )
    llm_model: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("OPENROUTER_MODEL", "LANGOTRON_LLM_MODEL")
    )
    llm_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices(
            "OPENROUTER_API_KEY", "NEXT_PUBLIC_OPENROUTER_API_KEY", "LANGOTRON_LLM_API_KEY"
        ),
    )
    llm_timeout_seconds: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("LANGOTRON_LLM_TIMEOUT_SECONDS")
    )
    site_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("NEXT_PUBLIC_SITE_URL", "LANGOTRON_SITE_URL")
    )
    debug: Optional[bool] = Field(default=None, validation_alias=AliasChoices("LANGOTRON_DEBUG"))


_ACTIVE_SETTINGS: Optional[LangotronSettings] = None


def resolve_path(path_value: str | Path) -> Path:
    """Resolve ``path_value`` relative to the project root when not absolute."""

    candidate = Path(os.path.expanduser(str(path_value)))
    if candidate.is_absolute():
        return candidate
    return (SCRIPT_DIR / candidate).resolve()


def _load_environment_overrides() -> Dict[str, Any]:
    """Return configuration overrides sourced from environment variables."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Invalid environment configuration detected; using defaults.",
            extra={"event": "config.env.validation_error", "error": str(exc)},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def _read_config_json(path: Optional[Path], label: str = "configuration") -> Dict[str, Any]:
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning(
            "Error loading %s from %s: %s. Proceeding without it.",
            label,
            path,
            exc,
            extra={"event": "config.file.load_failed"},
        )
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s at %s: expected a JSON object", label, path)
        return {}
    return data


def _apply_updates(settings: LangotronSettings, updates: Dict[str, Any]) -> LangotronSettings:
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def load_configuration(config_file: Optional[str] = None) -> LangotronSettings:
    """Load the layered configuration and make it the active settings."""

    global _ACTIVE_SETTINGS

    payload: Dict[str, Any] = {}
    payload.update(_read_config_json(DEFAULT_CONFIG_PATH, label="default configuration"))

    if config_file:
        override_path = Path(config_file).expanduser()
        if not override_path.is_absolute():
            override_path = (Path.cwd() / override_path).resolve()
    else:
        override_path = DEFAULT_LOCAL_CONFIG_PATH
    payload.update(_read_config_json(override_path, label="local configuration"))

    try:
        settings = LangotronSettings.model_validate(payload)
    except ValidationError as exc:
        raise RuntimeError("Invalid configuration detected") from exc

    settings = _apply_updates(settings, _load_environment_overrides())
    _ACTIVE_SETTINGS = settings
    return settings


def get_settings() -> LangotronSettings:
    """Return the currently loaded :class:`LangotronSettings` instance."""

    if _ACTIVE_SETTINGS is None:
        return load_configuration()
    return _ACTIVE_SETTINGS


def reset_settings() -> None:
    """Forget the active settings so the next access reloads them."""

    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None


def export_settings(settings: Optional[LangotronSettings] = None) -> Dict[str, Any]:
    """Return a dictionary view of ``settings`` without secret values."""

    resolved = settings or get_settings()
    return resolved.model_dump(mode="python", exclude=SENSITIVE_CONFIG_KEYS)


__all__ = [
    "DEFAULT_LEARNING_LANGUAGE",
    "DEFAULT_MODEL",
    "EnvironmentOverrides",
    "LangotronSettings",
    "export_settings",
    "get_settings",
    "load_configuration",
    "reset_settings",
    "resolve_path",
]
