"""CLI Typer."""
from typer.testing import CliRunner

from football_proxy import main as main_mod

runner = CliRunner()


class _Resp:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self._payload


def test_version():
    result = runner.invoke(main_mod.cli, ["--version"])
    assert result.exit_code == 0
    assert "football-proxy v" in result.stdout


def test_serve_unknown_proxy():
    result = runner.invoke(main_mod.cli, ["serve", "basketball"])
    assert result.exit_code == 2


def test_logs_command(monkeypatch):
    calls = []
    payload = {
        "count": 1,
        "logs": [{
            "timestamp": "2025-01-01T00:00:00.000Z",
            "type": "API_CALL",
            "endpoint": "fixtures",
            "data": {"results": 2, "goals": 6, "hasData": True},
        }],
    }

    def fake_get(url, params=None, timeout=None):
        calls.append((url, params))
        return _Resp(payload)

    monkeypatch.setattr(main_mod.requests, "get", fake_get)
    result = runner.invoke(main_mod.cli, ["logs", "https://proxy.test/"])

    assert result.exit_code == 0
    assert "API_CALL" in result.stdout
    assert "goals=6" in result.stdout
    assert calls == [("https://proxy.test/", {"action": "logs"})]


def test_logs_command_unconfigured(monkeypatch):
    monkeypatch.setattr(main_mod.requests, "get",
                        lambda *a, **k: _Resp({"error": "KV namespace not configured", "message": "x"}))
    result = runner.invoke(main_mod.cli, ["logs", "https://proxy.test/"])
    assert result.exit_code == 1


def test_clear_logs_command(monkeypatch):
    monkeypatch.setattr(main_mod.requests, "get",
                        lambda *a, **k: _Resp({"success": True, "message": "Logs cleared"}))
    result = runner.invoke(main_mod.cli, ["clear-logs", "https://proxy.test/"])
    assert result.exit_code == 0
    assert "Logs cleared" in result.stdout
