"""Transport configuration with XDG paths and precedence resolution.

A builder that is not handed an explicit :class:`~httpcli.models.ClientConfig`
resolves one lazily at send time through :func:`resolve_client_config`.

Precedence (high to low):
    1. Keyword overrides passed by the caller
    2. Environment variables (``HTTPCLI_TIMEOUT``, ``HTTPCLI_VERIFY_SSL``,
       ``HTTPCLI_FOLLOW_REDIRECTS``, ``HTTPCLI_USER_AGENT``)
    3. User config (``~/.config/httpcli/config.json`` on Linux/BSD,
       ``~/.httpcli/config.json`` elsewhere)
    4. Defaults
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from httpcli.exceptions import ConfigError
from httpcli.models import ClientConfig

_APP_NAME = "httpcli"
_CONFIG_FILENAME = "config.json"

_ENV_VARS = {
    "timeout": "HTTPCLI_TIMEOUT",
    "verify_ssl": "HTTPCLI_VERIFY_SSL",
    "follow_redirects": "HTTPCLI_FOLLOW_REDIRECTS",
    "user_agent": "HTTPCLI_USER_AGENT",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/httpcli/`` (default ``~/.config/httpcli/``).
    On macOS/Windows: ``~/.httpcli/``.

    The directory is only read from, so it is not created here.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def _user_config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Loading ---


def load_user_config() -> dict[str, Any]:
    """Load the raw user configuration file.

    Returns:
        The parsed JSON object, or an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = _user_config_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def _parse_bool(var: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {var}: {value!r}")


def load_env_config() -> dict[str, Any]:
    """Collect configuration values from ``HTTPCLI_*`` environment variables.

    Unset or empty variables are skipped.

    Raises:
        ConfigError: If a variable holds a value of the wrong type.
    """
    values: dict[str, Any] = {}
    for field, var in _ENV_VARS.items():
        raw = os.environ.get(var)
        if not raw:
            continue
        if field in ("verify_ssl", "follow_redirects"):
            values[field] = _parse_bool(var, raw)
        elif field == "timeout":
            try:
                values[field] = float(raw)
            except ValueError as exc:
                raise ConfigError(f"Invalid number for {var}: {raw!r}") from exc
        else:
            values[field] = raw
    return values


# --- Precedence resolution ---


def resolve_client_config(**overrides: Any) -> ClientConfig:
    """Resolve the effective :class:`~httpcli.models.ClientConfig`.

    Args:
        **overrides: Field values with the highest precedence.  ``None``
            values are ignored so callers can forward optional arguments.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the merged values fail validation.
    """
    merged: dict[str, Any] = {}
    merged.update(load_user_config())
    merged.update(load_env_config())
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ClientConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc
