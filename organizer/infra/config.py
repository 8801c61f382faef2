from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from organizer.core.models import TIME_BLOCK_TYPES

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Moscow"
DEFAULT_EVENT_TYPE = "personal"
DEFAULT_MAX_NOTIFICATIONS = 10


@dataclass(frozen=True)
class Settings:
    timezone: ZoneInfo
    max_notifications: int
    default_event_type: str
    require_start_time: bool


def load_settings() -> Settings:
    load_dotenv()

    env = os.environ
    timezone = _parse_timezone(env.get("ORGANIZER_TZ"))
    max_notifications = _parse_int_with_default(env.get("MAX_NOTIFICATIONS"), DEFAULT_MAX_NOTIFICATIONS)
    if max_notifications < 1:
        raise ValueError("MAX_NOTIFICATIONS must be positive")
    default_event_type = env.get("DEFAULT_EVENT_TYPE", DEFAULT_EVENT_TYPE).strip().lower()
    if default_event_type not in TIME_BLOCK_TYPES:
        LOGGER.warning("config.invalid DEFAULT_EVENT_TYPE=%s; using %s", default_event_type, DEFAULT_EVENT_TYPE)
        default_event_type = DEFAULT_EVENT_TYPE
    require_start_time = _parse_optional_bool(env.get("REQUIRE_START_TIME"))
    if require_start_time is None:
        require_start_time = True
    return Settings(
        timezone=timezone,
        max_notifications=max_notifications,
        default_event_type=default_event_type,
        require_start_time=require_start_time,
    )


def _parse_timezone(value: str | None) -> ZoneInfo:
    name = (value or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        LOGGER.warning("config.invalid ORGANIZER_TZ=%s; using %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def _parse_optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    trimmed = value.strip().lower()
    if not trimmed:
        return None
    return trimmed in {"1", "true", "yes", "on"}


def _parse_int_with_default(value: str | None, default: int) -> int:
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    return int(trimmed)
