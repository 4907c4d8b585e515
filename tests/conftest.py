"""Shared test fixtures for httpcli.

Every test runs with a fresh global output manager and with configuration
isolated from the real user environment, since builders resolve their
transport config lazily from ``HTTPCLI_*`` variables and the XDG config dir.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from httpcli.output import reset_output


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at creation
    time; capsys swaps those per test, so a stale manager would write to a
    closed stream.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at tmp_path and clear HTTPCLI_* variables.

    Returns:
        The directory that plays the role of ``$XDG_CONFIG_HOME``.
    """
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr("httpcli.config._is_xdg_platform", lambda: True)
    for var in [
        "HTTPCLI_TIMEOUT",
        "HTTPCLI_VERIFY_SSL",
        "HTTPCLI_FOLLOW_REDIRECTS",
        "HTTPCLI_USER_AGENT",
    ]:
        monkeypatch.delenv(var, raising=False)
    return config_home


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport() -> type[RecordingTransport]:
    """The :class:`RecordingTransport` class, for tests that need a custom handler."""
    return RecordingTransport


@pytest.fixture
def json_transport() -> RecordingTransport:
    """A recording transport answering every request with ``{"ok": true}``."""
    return RecordingTransport(lambda request: httpx.Response(200, json={"ok": True}))
