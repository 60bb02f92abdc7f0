from pathlib import Path

import pytest
from src.config import load_settings

ENV_VARS = [
    "COINGECKO_API_URL", "TONRUB_CACHE_DIR", "XDG_CACHE_HOME", "CACHE_TTL",
    "HISTORY_CACHE_TTL", "REQUEST_TIMEOUT", "TONRUB_TIMEZONE", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so teardown also removes values loaded from .env files
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    settings = load_settings()

    assert settings.api_url == "https://api.coingecko.com/api/v3"
    assert settings.cache_dir == tmp_path / "tonrub"
    assert settings.rate_ttl == 60
    assert settings.history_ttl == 3600
    assert settings.request_timeout == 10
    assert settings.timezone.zone == "Europe/Moscow"
    assert settings.log_level == "INFO"


def test_overrides_from_environment(monkeypatch):
    monkeypatch.setenv("TONRUB_CACHE_DIR", "/var/cache/tonrub")
    monkeypatch.setenv("CACHE_TTL", "5")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("TONRUB_TIMEZONE", "UTC")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.cache_dir == Path("/var/cache/tonrub")
    assert settings.rate_ttl == 5
    assert settings.request_timeout == 2.5
    assert settings.timezone.zone == "UTC"
    assert settings.log_level == "DEBUG"


def test_values_from_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("HISTORY_CACHE_TTL=120\n", encoding="utf-8")

    settings = load_settings(str(env_file))

    assert settings.history_ttl == 120


@pytest.mark.parametrize("name,value", [
    ("CACHE_TTL", "soon"),
    ("TONRUB_TIMEZONE", "Mars/Olympus"),
    ("LOG_LEVEL", "LOUD"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()
