"""Tests for layered configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from langotron import config_manager as cfg

_ENV_KEYS = (
    "OPENROUTER_API_KEY",
    "NEXT_PUBLIC_OPENROUTER_API_KEY",
    "LANGOTRON_LLM_API_KEY",
    "OPENROUTER_MODEL",
    "LANGOTRON_LLM_MODEL",
    "LANGOTRON_DATA_DIR",
    "LANGOTRON_STATE_DIR",
    "LANGOTRON_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    cfg.reset_settings()
    yield
    cfg.reset_settings()


def test_defaults_come_from_shipped_config(tmp_path: Path) -> None:
    settings = cfg.load_configuration(str(tmp_path / "missing.json"))

    assert settings.learning_language == "id"
    assert settings.llm_model == cfg.DEFAULT_MODEL
    assert settings.api_key_value() is None
    assert settings.resolve_data_dir().parts[-2:] == ("data", "words")


def test_local_file_overrides_defaults(tmp_path: Path) -> None:
    override = tmp_path / "config.local.json"
    override.write_text(json.dumps({"llm_model": "local-model", "debug": True}), encoding="utf-8")

    settings = cfg.load_configuration(str(override))

    assert settings.llm_model == "local-model"
    assert settings.debug is True
    assert cfg.get_settings() is settings


def test_invalid_local_file_is_skipped(tmp_path: Path) -> None:
    override = tmp_path / "broken.json"
    override.write_text("{not json", encoding="utf-8")

    settings = cfg.load_configuration(str(override))

    assert settings.llm_model == cfg.DEFAULT_MODEL


def test_environment_wins_over_files(tmp_path: Path, monkeypatch) -> None:
    override = tmp_path / "config.local.json"
    override.write_text(json.dumps({"llm_model": "local-model"}), encoding="utf-8")
    monkeypatch.setenv("OPENROUTER_MODEL", "env-model")
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")
    monkeypatch.setenv("LANGOTRON_DATA_DIR", str(tmp_path / "words"))

    settings = cfg.load_configuration(str(override))

    assert settings.llm_model == "env-model"
    assert settings.api_key_value() == "sk-test"
    assert settings.resolve_data_dir() == tmp_path / "words"


def test_export_settings_hides_the_api_key(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")

    exported = cfg.export_settings(cfg.load_configuration(str(tmp_path / "missing.json")))

    assert "llm_api_key" not in exported
    assert exported["learning_language"] == "id"
