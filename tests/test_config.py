"""Tests for httpcli.config -- XDG paths, env parsing, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from httpcli.config import (
    get_config_dir,
    load_env_config,
    load_user_config,
    resolve_client_config,
)
from httpcli.exceptions import ConfigError
from httpcli.models import ClientConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_user_config(config_home: Path, data: Any) -> Path:
    path = config_home / "httpcli" / "config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    text = data if isinstance(data, str) else json.dumps(data)
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestConfigDir:
    def test_xdg_custom(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "httpcli"

    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "httpcli"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("httpcli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".httpcli"

    def test_dir_not_created(self, isolated_config: Path) -> None:
        get_config_dir()
        assert not (isolated_config / "httpcli").exists()


# ---------------------------------------------------------------------------
# User config file
# ---------------------------------------------------------------------------


class TestUserConfig:
    def test_missing_file(self) -> None:
        assert load_user_config() == {}

    def test_valid_file(self, isolated_config: Path) -> None:
        _write_user_config(isolated_config, {"timeout": 5})
        assert load_user_config() == {"timeout": 5}

    def test_invalid_json(self, isolated_config: Path) -> None:
        _write_user_config(isolated_config, "{broken")
        with pytest.raises(ConfigError):
            load_user_config()

    def test_non_object(self, isolated_config: Path) -> None:
        _write_user_config(isolated_config, [1, 2])
        with pytest.raises(ConfigError):
            load_user_config()


# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------


class TestEnvConfig:
    def test_empty(self) -> None:
        assert load_env_config() == {}

    def test_all_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCLI_TIMEOUT", "2.5")
        monkeypatch.setenv("HTTPCLI_VERIFY_SSL", "no")
        monkeypatch.setenv("HTTPCLI_FOLLOW_REDIRECTS", "TRUE")
        monkeypatch.setenv("HTTPCLI_USER_AGENT", "agent/1")
        assert load_env_config() == {
            "timeout": 2.5,
            "verify_ssl": False,
            "follow_redirects": True,
            "user_agent": "agent/1",
        }

    def test_bad_boolean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCLI_VERIFY_SSL", "maybe")
        with pytest.raises(ConfigError, match="HTTPCLI_VERIFY_SSL"):
            load_env_config()

    def test_bad_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCLI_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="HTTPCLI_TIMEOUT"):
            load_env_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveClientConfig:
    def test_defaults(self) -> None:
        assert resolve_client_config() == ClientConfig()

    def test_file_over_defaults(self, isolated_config: Path) -> None:
        _write_user_config(isolated_config, {"timeout": 5, "verify_ssl": False})
        config = resolve_client_config()
        assert config.timeout == 5
        assert config.verify_ssl is False
        assert config.follow_redirects is True

    def test_env_over_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_user_config(isolated_config, {"timeout": 5})
        monkeypatch.setenv("HTTPCLI_TIMEOUT", "9")
        assert resolve_client_config().timeout == 9

    def test_overrides_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCLI_TIMEOUT", "9")
        assert resolve_client_config(timeout=1).timeout == 1

    def test_none_override_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCLI_USER_AGENT", "env-agent")
        assert resolve_client_config(user_agent=None).user_agent == "env-agent"

    def test_invalid_value_in_file(self, isolated_config: Path) -> None:
        _write_user_config(isolated_config, {"timeout": "later"})
        with pytest.raises(ConfigError):
            resolve_client_config()
