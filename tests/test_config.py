from __future__ import annotations

import pytest

from organizer.infra import config
from organizer.infra.config import load_settings

_ENV_KEYS = ("ORGANIZER_TZ", "MAX_NOTIFICATIONS", "DEFAULT_EVENT_TYPE", "REQUIRE_START_TIME")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer .env out of the way
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.timezone.key == "Europe/Moscow"
    assert settings.max_notifications == 10
    assert settings.default_event_type == "personal"
    assert settings.require_start_time is True


def test_values_from_env(monkeypatch) -> None:
    monkeypatch.setenv("ORGANIZER_TZ", "Asia/Yekaterinburg")
    monkeypatch.setenv("MAX_NOTIFICATIONS", " 3 ")
    monkeypatch.setenv("DEFAULT_EVENT_TYPE", "Practice")
    monkeypatch.setenv("REQUIRE_START_TIME", "no")

    settings = load_settings()

    assert settings.timezone.key == "Asia/Yekaterinburg"
    assert settings.max_notifications == 3
    assert settings.default_event_type == "practice"
    assert settings.require_start_time is False


def test_invalid_timezone_falls_back(monkeypatch, caplog) -> None:
    monkeypatch.setenv("ORGANIZER_TZ", "Mars/Olympus")
    with caplog.at_level("WARNING"):
        settings = load_settings()
    assert settings.timezone.key == "Europe/Moscow"
    assert "config.invalid ORGANIZER_TZ" in caplog.text


def test_invalid_event_type_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_EVENT_TYPE", "party")
    assert load_settings().default_event_type == "personal"


@pytest.mark.parametrize("value", ["0", "-1", "ten"])
def test_bad_max_notifications_raises(monkeypatch, value: str) -> None:
    monkeypatch.setenv("MAX_NOTIFICATIONS", value)
    with pytest.raises(ValueError):
        load_settings()


def test_blank_values_use_defaults(monkeypatch) -> None:
    monkeypatch.setenv("MAX_NOTIFICATIONS", "  ")
    monkeypatch.setenv("REQUIRE_START_TIME", "")
    settings = load_settings()
    assert settings.max_notifications == 10
    assert settings.require_start_time is True
