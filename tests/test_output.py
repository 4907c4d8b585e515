"""Tests for the diagnostics output manager."""

from __future__ import annotations

import httpx

from httpcli.client.builder import get
from httpcli.output import OutputFormat, OutputManager, get_output, reset_output, set_output


class TestStreams:
    def test_debug_hidden_unless_verbose(self, capsys) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "[debug] shown" in err

    def test_warning_shown_without_verbose(self, capsys) -> None:
        OutputManager(no_color=True).warning("careful")
        captured = capsys.readouterr()
        assert captured.err == "Warning: careful\n"
        assert captured.out == ""

    def test_no_color_env(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputManager().format == OutputFormat.PLAIN


class TestGlobalOutput:
    def test_default_is_not_verbose(self) -> None:
        reset_output()
        assert not get_output().is_verbose

    def test_set_output(self) -> None:
        manager = OutputManager(no_color=True, verbose=True)
        set_output(manager)
        assert get_output() is manager


class TestRequestInfo:
    def test_plain_dump_goes_to_stdout(self, capsys) -> None:
        req = get("http://x/a").set_param("q", "1")
        OutputManager(format=OutputFormat.PLAIN).request_info(req)
        captured = capsys.readouterr()
        assert captured.out == "GET http://x/a?q=1 HTTP/1.1\n"
        assert captured.err == ""

    def test_send_traced_in_verbose_mode(self, capsys) -> None:
        set_output(OutputManager(no_color=True, verbose=True))
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        get("http://x/a").with_transport(transport).execute()
        err = capsys.readouterr().err
        assert "[debug] GET http://x/a HTTP/1.1" in err
        assert "[debug] 200 OK from http://x/a" in err

    def test_insecure_tls_on_caller_client_warns(self, capsys) -> None:
        set_output(OutputManager(no_color=True))
        with httpx.Client() as client:
            get("http://x/a").with_client(client).with_insecure_tls()
        assert "has no effect" in capsys.readouterr().err

    def test_insecure_tls_before_caller_client_warns(self, capsys) -> None:
        set_output(OutputManager(no_color=True))
        with httpx.Client() as client:
            get("http://x/a").with_insecure_tls().with_client(client)
        assert "has no effect" in capsys.readouterr().err
