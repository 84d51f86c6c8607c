import json

import pytest
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("TRADECONF_CLIENT_FACTORY", "fake_client:account_factory")
    monkeypatch.setenv("TRADECONF_ACCOUNT_NAME", "alice")
    monkeypatch.setenv("TRADECONF_LOG_LEVEL", "CRITICAL")


def test_load_json():
    result = runner.invoke(app, ["load", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "list"
    assert [c["id"] for c in payload["confirmations"]] == ["A", "B"]


def test_load_writes_output_file(tmp_path):
    output = tmp_path / "result.json"

    result = runner.invoke(app, ["load", "--output", str(output)])

    assert result.exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8"))["status"] == "list"


def test_load_expired_session_exits_2(monkeypatch):
    monkeypatch.setenv("TRADECONF_CLIENT_FACTORY", "fake_client:expired_account_factory")

    result = runner.invoke(app, ["load", "--json"])

    assert result.exit_code == 2
    assert json.loads(result.stdout)["reason"] == "needs_reauth"


def test_load_fetch_failure_exits_1(monkeypatch):
    monkeypatch.setenv("TRADECONF_CLIENT_FACTORY", "fake_client:failing_account_factory")

    result = runner.invoke(app, ["load", "--json"])

    assert result.exit_code == 1
    assert json.loads(result.stdout)["message"] == "Something went wrong:\nservice unavailable"


def test_missing_factory_exits_1(monkeypatch):
    monkeypatch.delenv("TRADECONF_CLIENT_FACTORY")

    result = runner.invoke(app, ["load"])

    assert result.exit_code == 1


def test_accept_json():
    result = runner.invoke(app, ["accept", "A", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["action"] == "accept"
    assert payload["acknowledged"] is True
    assert payload["reload"]["status"] == "list"


def test_deny_unknown_id_exits_1():
    result = runner.invoke(app, ["deny", "Z"])

    assert result.exit_code == 1
    assert "not pending" in result.stdout


def test_watch_runs_requested_cycles():
    result = runner.invoke(app, ["watch", "--json", "--cycles", "2", "--interval", "1"])

    assert result.exit_code == 0
    assert result.stdout.count('"status": "list"') == 2


def test_doctor_set_client_writes_user_env(tmp_path):
    result = runner.invoke(app, ["doctor", "set-client", "pkg.mod:build", "--account", "bob"])

    assert result.exit_code == 0
    env_text = (tmp_path / "config" / "tradeconf" / ".env").read_text(encoding="utf-8")
    assert "TRADECONF_CLIENT_FACTORY=pkg.mod:build" in env_text
    assert "TRADECONF_ACCOUNT_NAME=bob" in env_text


def test_doctor_run_reports_factory():
    result = runner.invoke(app, ["doctor", "run"])

    assert result.exit_code == 0
    assert "Client factory" in result.stdout


def test_accept_error_with_brackets_is_reported(monkeypatch):
    monkeypatch.setenv("TRADECONF_CLIENT_FACTORY", "fake_client:bracketed_account_factory")

    result = runner.invoke(app, ["accept", "A"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "bad [/confirmation] state" in result.stdout


def test_load_table_with_bracketed_headline(monkeypatch):
    monkeypatch.setenv("TRADECONF_CLIENT_FACTORY", "fake_client:bracketed_account_factory")

    result = runner.invoke(app, ["load"])

    assert result.exit_code == 0
    assert "[bold]gift[/x]" in result.stdout
