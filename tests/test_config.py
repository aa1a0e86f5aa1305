"""Tests for settings models and the JSON settings file."""

import json

import pytest
from pydantic import ValidationError

from shipit.core.config import (
    CONFIG_ENV_VAR,
    MASK,
    default_config_path,
    load_settings,
    masked,
    save_settings,
)
from shipit.core.errors import ConfigurationError
from shipit.models.settings import GithubSettings, OllamaSettings, Settings


def test_defaults():
    settings = Settings()

    assert settings.shipit.ai is False
    assert settings.shipit.dryrun is False
    assert settings.ollama.model == "qwen2.5-coder:7b"
    assert settings.ollama.url == "http://localhost:11434/api/generate"
    assert settings.ollama.options.temperature == 0.1
    assert settings.ollama.options.top_p == 0.4
    assert settings.ollama.options.seed == 43
    assert settings.github.domain == "github.com"
    assert settings.gitlab.domain == "gitlab.com"
    assert not settings.github.configured
    assert not settings.gitlab.configured


def test_overrides_only_switch_on():
    stored = Settings.model_validate({"shipit": {"ai": True}})

    run = stored.with_overrides(ai=False, dryrun=True)

    assert run.shipit.ai is True
    assert run.shipit.dryrun is True
    assert stored.shipit.dryrun is False


def test_endpoint_gets_leading_slash():
    assert OllamaSettings(endpoint="api/generate").endpoint == "/api/generate"


def test_unknown_agent_rejected():
    with pytest.raises(ValidationError):
        Settings.model_validate({"shipit": {"agent": "openai"}})


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.json") == Settings()


def test_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    settings = Settings(github=GithubSettings(token="gh"))

    written = save_settings(settings, path)

    assert written == path
    assert load_settings(path) == settings


def test_partial_file_fills_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"gitlab": {"token": "gl", "domain": "gitlab.internal"}}))

    settings = load_settings(path)

    assert settings.gitlab.configured
    assert settings.gitlab.domain == "gitlab.internal"
    assert settings.ollama.port == 11434


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="Failed to read config"):
        load_settings(path)


def test_invalid_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"ollama": {"port": "not-a-port"}}))

    with pytest.raises(ConfigurationError, match="Invalid config"):
        load_settings(path)


def test_refuses_to_overwrite(tmp_path):
    path = tmp_path / "config.json"
    save_settings(Settings(), path)

    with pytest.raises(ConfigurationError, match="already exists"):
        save_settings(Settings(), path, overwrite=False)


def test_env_var_overrides_location(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.json"))

    assert default_config_path() == tmp_path / "custom.json"


def test_masked_hides_tokens():
    data = masked(Settings(github=GithubSettings(token="secret")))

    assert data["github"]["token"] == MASK
    assert data["gitlab"]["token"] is None
