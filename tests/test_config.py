"""Configuration precedence: explicit values > environment > defaults."""

from pathlib import Path

import pytest

from sessionkit.config import DEFAULT_API_URL, DEFAULT_TIMEOUT, SessionConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SESSIONKIT_API_URL",
        "SESSIONKIT_TIMEOUT",
        "SESSIONKIT_STATE_DIR",
        "SESSIONKIT_RESTORE_ON_START",
        "SESSIONKIT_REFRESH_ON_RESTORE",
        "SESSIONKIT_SEND_DISPLAY_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = SessionConfig()

    assert config.api_url == DEFAULT_API_URL
    assert config.request_timeout == DEFAULT_TIMEOUT
    assert config.restore_on_start is True
    assert config.refresh_on_restore is False
    assert config.send_display_name is False
    assert config.state_path == Path.home() / ".sessionkit"


def test_environment_overrides_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("SESSIONKIT_API_URL", "https://auth.example.com/")
    monkeypatch.setenv("SESSIONKIT_TIMEOUT", "2.5")
    monkeypatch.setenv("SESSIONKIT_STATE_DIR", str(tmp_path))
    monkeypatch.setenv("SESSIONKIT_RESTORE_ON_START", "no")
    monkeypatch.setenv("SESSIONKIT_REFRESH_ON_RESTORE", "1")
    monkeypatch.setenv("SESSIONKIT_SEND_DISPLAY_NAME", "True")

    config = SessionConfig()

    assert config.api_url == "https://auth.example.com"
    assert config.request_timeout == 2.5
    assert config.state_path == tmp_path
    assert config.restore_on_start is False
    assert config.refresh_on_restore is True
    assert config.send_display_name is True


def test_explicit_values_win(monkeypatch):
    monkeypatch.setenv("SESSIONKIT_API_URL", "https://env.example.com")
    monkeypatch.setenv("SESSIONKIT_RESTORE_ON_START", "true")

    config = SessionConfig(api_url="http://cli.example.com", restore_on_start=False)

    assert config.api_url == "http://cli.example.com"
    assert config.restore_on_start is False


@pytest.mark.parametrize("name,value", [
    ("SESSIONKIT_TIMEOUT", "soon"),
    ("SESSIONKIT_RESTORE_ON_START", "maybe"),
])
def test_invalid_environment_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        SessionConfig()


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        SessionConfig(request_timeout=-1)
