import pytest
from pydantic import ValidationError

from core.config import SyncSettings, _parse_env_lines, get_user_config_dir, write_user_env_vars


def test_defaults():
    settings = SyncSettings(_env_file=None)

    assert settings.overlap_policy == "queue"
    assert settings.request_timeout_seconds == 30.0
    assert settings.poll_interval_seconds == 60.0


def test_reads_prefixed_env(monkeypatch):
    monkeypatch.setenv("TRADECONF_CLIENT_FACTORY", "pkg.mod:build")
    monkeypatch.setenv("TRADECONF_OVERLAP_POLICY", "discard")

    settings = SyncSettings(_env_file=None)

    assert settings.client_factory == "pkg.mod:build"
    assert settings.overlap_policy == "discard"


@pytest.mark.parametrize(
    "field, value",
    [
        ("overlap_policy", "parallel"),
        ("request_timeout_seconds", 0),
        ("poll_interval_seconds", 0.5),
    ],
)
def test_rejects_invalid_values(field, value):
    with pytest.raises(ValidationError):
        SyncSettings(_env_file=None, **{field: value})


def test_user_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr("core.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_user_config_dir() == tmp_path / "tradeconf"


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"TRADECONF_ACCOUNT_NAME": "alice"}, env_path=env_path)

    write_user_env_vars(
        {"TRADECONF_CLIENT_FACTORY": "pkg:factory", "TRADECONF_ACCOUNT_NAME": None},
        env_path=env_path,
    )

    data = _parse_env_lines(env_path.read_text(encoding="utf-8"))
    assert data == {"TRADECONF_ACCOUNT_NAME": "alice", "TRADECONF_CLIENT_FACTORY": "pkg:factory"}


def test_parse_env_lines_skips_comments_and_quotes():
    text = "# comment\n\nA='1'\nB=\"two\"\nnot a pair\n"

    assert _parse_env_lines(text) == {"A": "1", "B": "two"}
