"""Tests for the command-line entry point."""

from __future__ import annotations

import httpx
import pytest

from cf_ddns import cli
from cf_ddns.errors import StepFailedError, TransportError
from cf_ddns.updater import UpdateSummary

REQUIRED_ARGS = [
    "-zone-id",
    "zone-1",
    "-record-id-v4",
    "rec-v4",
    "-record-id-v6",
    "rec-v6",
    "-name",
    "home.example.com",
]


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Run in an empty directory without a token and keep logging untouched."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CF_API_TOKEN", raising=False)
    monkeypatch.setattr(cli, "setup_logging", lambda _config: None)


@pytest.fixture
def no_network(monkeypatch):
    """Fail any attempt to send an HTTP request."""
    calls: list[httpx.Request] = []

    async def send(self, request, **kwargs):
        calls.append(request)
        msg = "network access in test"
        raise AssertionError(msg)

    monkeypatch.setattr(httpx.AsyncClient, "send", send)
    return calls


class TestMain:
    """Tests for cli.main."""

    def test_missing_name_without_token(self, capsys, no_network):
        args = [a for a in REQUIRED_ARGS if a not in {"-name", "home.example.com"}]
        with pytest.raises(SystemExit) as exc_info:
            cli.main(args)

        assert exc_info.value.code == 1
        assert no_network == []
        err = capsys.readouterr().err
        assert "Error: Missing required parameters: -api-token, -name" in err
        assert "usage: cf-ddns" in err
        assert "CF_API_TOKEN" in err

    def test_invalid_ttl(self, capsys, no_network, monkeypatch):
        monkeypatch.setenv("CF_API_TOKEN", "env-token")
        with pytest.raises(SystemExit) as exc_info:
            cli.main([*REQUIRED_ARGS, "-ttl", "0"])
        assert exc_info.value.code == 1
        assert no_network == []
        assert "record.ttl" in capsys.readouterr().err

    def test_success(self, capsys, monkeypatch):
        monkeypatch.setenv("CF_API_TOKEN", "env-token")
        seen = []

        async def fake_run_update(config):
            seen.append(config)
            return UpdateSummary(name=config.record.name, ipv4="203.0.113.7", ipv6="2001:db8::7")

        monkeypatch.setattr(cli, "run_update", fake_run_update)

        cli.main(REQUIRED_ARGS)

        assert seen[0].cloudflare.api_token == "env-token"
        out = capsys.readouterr().out
        assert "Successfully updated all DNS records!" in out
        assert "A record:    home.example.com -> 203.0.113.7" in out
        assert "AAAA record: home.example.com -> 2001:db8::7" in out

    def test_step_failure(self, capsys, monkeypatch):
        async def fake_run_update(config):
            raise StepFailedError("updating A record", TransportError("connection refused"))

        monkeypatch.setattr(cli, "run_update", fake_run_update)

        with pytest.raises(SystemExit) as exc_info:
            cli.main([*REQUIRED_ARGS, "-api-token", "flag-token"])

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Error updating A record: connection refused" in captured.err
        assert "Successfully" not in captured.out
