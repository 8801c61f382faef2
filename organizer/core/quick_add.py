"""Quick-add flow: live preview of parsed text and submission to the store.

preview_quick_add() is safe to call on every keystroke; submit_quick_add()
validates the same preview and hands the draft to EventStore. Neither
raises on bad input: problems come back as errors/status on the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Literal

from organizer.core import event_parser
from organizer.core.event_store import EventStore
from organizer.core.models import EventDraft

LOGGER = logging.getLogger(__name__)

QuickAddStatus = Literal["ok", "warning", "error"]

EMPTY_INPUT_TEXT = "Введите описание события для создания"
NOT_RECOGNIZED_TEXT = "Не удалось распознать событие"
START_REQUIRED_TEXT = "Не указано время начала"


@dataclass(frozen=True)
class QuickAddPreview:
    text: str
    draft: EventDraft | None
    tags: list[str] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.draft is not None and not self.errors


@dataclass(frozen=True)
class QuickAddResult:
    status: QuickAddStatus
    title: str
    message: str
    preview: QuickAddPreview
    event_id: str | None = None


def preview_quick_add(text: str, *, today: date, require_start: bool = True) -> QuickAddPreview:
    raw = text or ""
    if not raw.strip():
        return QuickAddPreview(text=raw, draft=None, errors=[EMPTY_INPUT_TEXT])
    parsed = event_parser.parse(raw, today)
    if parsed is None:
        return QuickAddPreview(text=raw, draft=None, errors=[NOT_RECOGNIZED_TEXT])
    tags = event_parser.extract_tags(raw)
    mentions = event_parser.extract_mentions(raw)
    draft = replace(
        parsed,
        title=event_parser.clean_text_from_tags(parsed.title),
        tags=tuple(tags) or None,
        location=mentions[0] if mentions else None,
    )
    errors: list[str] = []
    if require_start and not draft.start:
        errors.append(START_REQUIRED_TEXT)
    return QuickAddPreview(text=raw, draft=draft, tags=tags, mentions=mentions, errors=errors)


def submit_quick_add(
    text: str,
    store: EventStore,
    *,
    today: date,
    require_start: bool = True,
) -> QuickAddResult:
    preview = preview_quick_add(text, today=today, require_start=require_start)
    if not (text or "").strip():
        return QuickAddResult(status="warning", title="Пустое поле", message=EMPTY_INPUT_TEXT, preview=preview)
    if not preview.is_valid or preview.draft is None:
        LOGGER.info("quick_add.submit rejected errors=%s", "; ".join(preview.errors))
        return QuickAddResult(
            status="error",
            title="Ошибка валидации",
            message=preview.errors[0],
            preview=preview,
        )
    try:
        event_id = store.add_draft_as_event(preview.draft)
    except ValueError as exc:
        LOGGER.warning("quick_add.submit store_rejected error=%s", exc)
        return QuickAddResult(status="error", title="Ошибка создания", message=str(exc), preview=preview)
    LOGGER.info("quick_add.submit ok event_id=%s", event_id)
    stored = store.get_event(event_id)
    title = stored.title if stored else preview.draft.title
    return QuickAddResult(
        status="ok",
        title="Событие создано",
        message=f'"{title}" добавлено в календарь',
        preview=preview,
        event_id=event_id,
    )


def format_duration_minutes(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    if hours and rest:
        return f"{hours} ч {rest} мин"
    if hours:
        return f"{hours} ч"
    return f"{rest} мин"


def render_preview(preview: QuickAddPreview) -> str:
    draft = preview.draft
    if draft is None:
        return "\n".join(f"⚠️ {error}" for error in preview.errors)
    lines = [f"✨ {draft.title or '(без названия)'}"]
    if draft.date:
        lines.append(f"Дата: {draft.date}")
    if draft.start and draft.end:
        lines.append(f"Время: {draft.start} - {draft.end}")
    elif draft.start:
        lines.append(f"Время: {draft.start}")
    if draft.duration:
        lines.append(f"Длительность: {format_duration_minutes(draft.duration)}")
    if draft.location:
        lines.append(f"Место: {draft.location}")
    if preview.tags:
        lines.append("Теги: " + " ".join(f"#{tag}" for tag in preview.tags))
    for error in preview.errors:
        lines.append(f"⚠️ {error}")
    return "\n".join(lines)
