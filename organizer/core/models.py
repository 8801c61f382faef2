from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

TimeBlockType = Literal["practice", "concert", "lesson", "travel", "meal", "break", "personal", "free"]
Priority = Literal["low", "medium", "high"]
NotificationType = Literal["success", "error", "warning", "info"]

TIME_BLOCK_TYPES: frozenset[str] = frozenset(
    {"practice", "concert", "lesson", "travel", "meal", "break", "personal", "free"}
)
DEFAULT_EVENT_TITLE = "Событие"


@dataclass(frozen=True)
class EventDraft:
    """Parsed quick-add input; every field may be absent."""

    title: str = ""
    start: str | None = None
    end: str | None = None
    date: str | None = None
    duration: int | None = None
    tags: tuple[str, ...] | None = None
    location: str | None = None


@dataclass(frozen=True)
class TimeBlock:
    """A stored event, promoted from a draft by the EventStore."""

    id: str
    title: str
    start: str
    date: str
    created_at: str
    updated_at: str
    end: str | None = None
    type: TimeBlockType = "personal"
    description: str | None = None
    location: str | None = None
    priority: Priority | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    completed: bool = False


@dataclass(frozen=True)
class Notification:
    id: str
    type: NotificationType
    title: str
    message: str
    timestamp: str
    auto_remove: bool = True
