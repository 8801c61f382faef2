from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import fields as dataclass_fields, replace
from datetime import date, datetime, timezone
from typing import Callable, Iterable

from organizer.core.event_parser import normalize_event_text
from organizer.core.models import (
    DEFAULT_EVENT_TITLE,
    TIME_BLOCK_TYPES,
    EventDraft,
    Notification,
    NotificationType,
    TimeBlock,
)

LOGGER = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id", "created_at", "updated_at"}
_TIME_BLOCK_FIELDS = {field.name for field in dataclass_fields(TimeBlock)}


class EventStore:
    """In-memory list of time blocks plus a newest-first notification queue."""

    def __init__(
        self,
        *,
        max_notifications: int = 10,
        default_type: str = "personal",
        now_provider: Callable[[], datetime] | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        if default_type not in TIME_BLOCK_TYPES:
            raise ValueError(f"Неизвестный тип события: {default_type}")
        self._max_notifications = max(1, max_notifications)
        self._default_type = default_type
        self._now_provider = now_provider or (lambda: datetime.now(timezone.utc))
        self._today_provider = today_provider or date.today
        self._events: list[TimeBlock] = []
        self._notifications: deque[Notification] = deque(maxlen=self._max_notifications)

    @property
    def events(self) -> list[TimeBlock]:
        return list(self._events)

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    def add_draft_as_event(self, draft: EventDraft) -> str:
        """Promote a parsed draft to a stored event and return its id."""
        if not draft.start:
            raise ValueError("Не указано время начала")
        return self.add_event(
            title=draft.title or DEFAULT_EVENT_TITLE,
            start=draft.start,
            end=draft.end,
            date=draft.date or self._today_provider().isoformat(),
            location=draft.location,
            tags=tuple(draft.tags or ()),
        )

    def add_event(self, *, title: str, start: str, date: str, **fields: object) -> str:
        _check_field_names(fields)
        timestamp = self._now_provider().isoformat()
        event_id = _generate_id({event.id for event in self._events})
        fields.setdefault("type", self._default_type)
        event = TimeBlock(
            id=event_id,
            title=title,
            start=start,
            date=date,
            created_at=timestamp,
            updated_at=timestamp,
            **fields,
        )
        self._events.append(event)
        self._sort()
        LOGGER.info("event_store.add event_id=%s date=%s start=%s", event_id, date, start)
        self._notify("success", "Событие добавлено", f'"{title}" успешно создано')
        return event_id

    def get_event(self, event_id: str) -> TimeBlock | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def update_event(self, event_id: str, **updates: object) -> TimeBlock:
        _check_field_names(updates)
        index = self._index_of(event_id)
        if index is None:
            raise KeyError(event_id)
        updated = replace(self._events[index], updated_at=self._now_provider().isoformat(), **updates)
        self._events[index] = updated
        self._sort()
        LOGGER.info("event_store.update event_id=%s fields=%s", event_id, ",".join(sorted(updates)))
        self._notify("info", "Событие обновлено", "Изменения сохранены")
        return updated

    def delete_event(self, event_id: str) -> bool:
        index = self._index_of(event_id)
        if index is None:
            LOGGER.warning("event_store.delete missing event_id=%s", event_id)
            return False
        removed = self._events.pop(index)
        LOGGER.info("event_store.delete event_id=%s", event_id)
        self._notify("info", "Событие удалено", f'"{removed.title}" было удалено')
        return True

    def toggle_complete(self, event_id: str) -> TimeBlock | None:
        index = self._index_of(event_id)
        if index is None:
            return None
        current = self._events[index]
        completed = not current.completed
        updated = replace(current, completed=completed, updated_at=self._now_provider().isoformat())
        self._events[index] = updated
        if completed:
            self._notify("success", "Событие выполнено", f'"{current.title}" завершено')
        else:
            self._notify("success", "Событие отмечено как невыполненное", f'"{current.title}" возвращено в работу')
        return updated

    def events_for_date(self, day: date | str) -> list[TimeBlock]:
        key = day.isoformat() if isinstance(day, date) else day
        return [event for event in self._events if event.date == key]

    def events_for_range(self, start: date, end: date) -> list[TimeBlock]:
        first, last = start.isoformat(), end.isoformat()
        return [event for event in self._events if first <= event.date <= last]

    def search(self, query: str) -> list[TimeBlock]:
        needle = normalize_event_text(query)
        if not needle:
            return self.events
        matches = []
        for event in self._events:
            haystack = " ".join(
                [event.title, event.description or "", event.location or "", *event.tags]
            )
            if needle in normalize_event_text(haystack):
                matches.append(event)
        return matches

    def remove_notification(self, notification_id: str) -> None:
        self._notifications = deque(
            (item for item in self._notifications if item.id != notification_id),
            maxlen=self._max_notifications,
        )

    def clear_notifications(self) -> None:
        self._notifications.clear()

    def _notify(self, kind: NotificationType, title: str, message: str) -> None:
        notification = Notification(
            id=uuid.uuid4().hex,
            type=kind,
            title=title,
            message=message,
            timestamp=self._now_provider().isoformat(),
        )
        # newest first; maxlen drops the oldest from the right
        self._notifications.appendleft(notification)

    def _index_of(self, event_id: str) -> int | None:
        for index, event in enumerate(self._events):
            if event.id == event_id:
                return index
        return None

    def _sort(self) -> None:
        self._events.sort(key=lambda event: (event.date, event.start))


def _generate_id(existing_ids: set[str]) -> str:
    while True:
        candidate = uuid.uuid4().hex[:8]
        if candidate not in existing_ids:
            return candidate


def _check_field_names(names: Iterable[str]) -> None:
    blocked = _IMMUTABLE_FIELDS.intersection(names)
    if blocked:
        raise ValueError(f"Нельзя изменить поля: {', '.join(sorted(blocked))}")
    unknown = set(names) - _TIME_BLOCK_FIELDS
    if unknown:
        raise ValueError(f"Неизвестные поля события: {', '.join(sorted(unknown))}")
