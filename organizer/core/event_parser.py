"""Quick-add text parser: free-form event text -> EventDraft.

Each recognizer is an ordered table of (pattern, extractor) pairs; the first
pattern that matches and validates wins. Recognizers return None on NoMatch
and never raise. parse() composes them over the raw input.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, timedelta
from typing import Callable

from organizer.core.models import EventDraft

# ---- time ----------------------------------------------------------------

_TIME_MARKER_RE = re.compile(r"^в\s+", re.IGNORECASE)


def _hours_minutes(match: re.Match[str]) -> tuple[int, int]:
    return int(match.group(1)), int(match.group(2))


def _compressed(match: re.Match[str]) -> tuple[int, int]:
    padded = match.group(1).zfill(4)
    return int(padded[:2]), int(padded[2:])


def _hours_only(match: re.Match[str]) -> tuple[int, int]:
    return int(match.group(1)), 0


_TIME_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], tuple[int, int]]]] = [
    (re.compile(r"(\d{1,2}):(\d{2})"), _hours_minutes),  # 14:30
    (re.compile(r"(\d{1,2})\.(\d{2})"), _hours_minutes),  # 14.30
    (re.compile(r"(\d{1,2}),(\d{2})"), _hours_minutes),  # 14,30
    (re.compile(r"(\d{1,2})-(\d{2})"), _hours_minutes),  # 14-30
    (re.compile(r"(\d{3,4})"), _compressed),  # 1430, 230
    (re.compile(r"(\d{1,2})"), _hours_only),  # 14
]


def parse_time_input(value: str) -> str | None:
    """Normalize a single time token to HH:MM, or None."""
    cleaned = _TIME_MARKER_RE.sub("", (value or "").strip(), count=1)
    cleaned = re.sub(r"\s", "", cleaned)
    for pattern, extract in _TIME_PATTERNS:
        match = pattern.fullmatch(cleaned)
        if not match:
            continue
        hours, minutes = extract(match)
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return f"{hours:02d}:{minutes:02d}"
    return None


# ---- duration ------------------------------------------------------------

_NA_MARKER_RE = re.compile(r"^на\s+", re.IGNORECASE)


def _hours_and_minutes(match: re.Match[str]) -> int:
    return int(match.group(1)) * 60 + int(match.group(2))


def _whole_hours(match: re.Match[str]) -> int:
    return int(match.group(1)) * 60


def _plain_minutes(match: re.Match[str]) -> int:
    return int(match.group(1))


def _decimal_hours(match: re.Match[str]) -> int:
    # half-up rounding on the exact digits: 2.5 -> 150, 1.5 -> 90
    whole, fraction = match.group(1).split(".")
    scale = 10 ** len(fraction)
    return (int(whole + fraction) * 120 + scale) // (2 * scale)


_DURATION_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], int]]] = [
    (re.compile(r"(\d+)ч(\d+)(?:м|мин)?"), _hours_and_minutes),  # 2ч30м
    (re.compile(r"(\d+)ч"), _whole_hours),  # 2ч
    (re.compile(r"(\d+)м(?:ин)?"), _plain_minutes),  # 30м, 30мин
    (re.compile(r"(\d+):(\d+)"), _hours_and_minutes),  # 2:30
    (re.compile(r"(\d+\.\d+)"), _decimal_hours),  # 2.5
    (re.compile(r"(\d+)"), _plain_minutes),  # 30
]


def parse_duration_input(value: str) -> int | None:
    """Normalize a duration token to a positive number of minutes, or None."""
    cleaned = _NA_MARKER_RE.sub("", (value or "").strip().lower(), count=1)
    cleaned = re.sub(r"\s", "", cleaned)
    for pattern, extract in _DURATION_PATTERNS:
        match = pattern.fullmatch(cleaned)
        if not match:
            continue
        try:
            total = extract(match)
        except ValueError:
            # digit run longer than int() accepts
            return None
        return total if total > 0 else None
    return None


# ---- date ----------------------------------------------------------------

_RELATIVE_DAYS = {
    "сегодня": 0,
    "today": 0,
    "завтра": 1,
    "tomorrow": 1,
    "послезавтра": 2,
}
_WEEKDAYS = {
    "понедельник": 0,
    "пн": 0,
    "monday": 0,
    "mon": 0,
    "вторник": 1,
    "вт": 1,
    "tuesday": 1,
    "tue": 1,
    "среда": 2,
    "среду": 2,
    "ср": 2,
    "wednesday": 2,
    "wed": 2,
    "четверг": 3,
    "чт": 3,
    "thursday": 3,
    "thu": 3,
    "пятница": 4,
    "пятницу": 4,
    "пт": 4,
    "friday": 4,
    "fri": 4,
    "суббота": 5,
    "субботу": 5,
    "сб": 5,
    "saturday": 5,
    "sat": 5,
    "воскресенье": 6,
    "вс": 6,
    "sunday": 6,
    "sun": 6,
}


def _day_month_year(match: re.Match[str], today: date) -> tuple[int, int, int]:
    return int(match.group(3)), int(match.group(2)), int(match.group(1))


def _day_month_short_year(match: re.Match[str], today: date) -> tuple[int, int, int]:
    year = int(match.group(3))
    year += 2000 if year < 50 else 1900
    return year, int(match.group(2)), int(match.group(1))


def _day_month(match: re.Match[str], today: date) -> tuple[int, int, int]:
    day = int(match.group(1))
    month = int(match.group(2))
    year = today.year
    if (month, day) < (today.month, today.day):
        year += 1
    return year, month, day


def _year_month_day(match: re.Match[str], today: date) -> tuple[int, int, int]:
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


_DATE_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str], date], tuple[int, int, int]]]] = [
    (re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})"), _day_month_year),  # 25.12.2024
    (re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{2})"), _day_month_short_year),  # 25.12.24
    (re.compile(r"(\d{1,2})\.(\d{1,2})"), _day_month),  # 25.12
    (re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})"), _year_month_day),  # 2024-12-25
    (re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})"), _day_month_year),  # 25-12-2024
    (re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})"), _day_month_year),  # 25/12/2024
    (re.compile(r"(\d{1,2})/(\d{1,2})"), _day_month),  # 25/12
]


def resolve_date(value: str, today: date) -> date | None:
    """Resolve a relative or absolute date token against today."""
    cleaned = _NA_MARKER_RE.sub("", (value or "").strip().lower(), count=1)
    if not cleaned:
        return None
    offset = _RELATIVE_DAYS.get(cleaned)
    if offset is not None:
        return today + timedelta(days=offset)
    weekday = _WEEKDAYS.get(cleaned)
    if weekday is not None:
        # today's own weekday means next week
        delta = (weekday - today.weekday()) % 7 or 7
        return today + timedelta(days=delta)
    for pattern, extract in _DATE_PATTERNS:
        match = pattern.fullmatch(cleaned)
        if not match:
            continue
        year, month, day = extract(match, today)
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def parse_date_input(value: str, today: date) -> str | None:
    """Resolve a date token to YYYY-MM-DD, or None."""
    resolved = resolve_date(value, today)
    if resolved is None:
        return None
    return resolved.isoformat()


# ---- tags and mentions ---------------------------------------------------

_WORD_CHARS = r"[a-zA-Zа-яА-ЯёЁ0-9_]+"
_HASHTAG_RE = re.compile(rf"#({_WORD_CHARS})")
_MENTION_RE = re.compile(rf"@({_WORD_CHARS})")


def extract_tags(text: str) -> list[str]:
    return [tag.lower() for tag in _HASHTAG_RE.findall(text or "")]


def extract_mentions(text: str) -> list[str]:
    return [mention.lower() for mention in _MENTION_RE.findall(text or "")]


def clean_text_from_tags(text: str) -> str:
    cleaned = _HASHTAG_RE.sub("", text or "")
    cleaned = _MENTION_RE.sub("", cleaned)
    return re.sub(r"\s+", " ", cleaned).strip()


def normalize_event_text(text: str) -> str:
    """Lower-case, drop diacritics and punctuation; used for search."""
    lowered = unicodedata.normalize("NFD", (text or "").lower())
    stripped = "".join(ch for ch in lowered if not unicodedata.combining(ch))
    stripped = re.sub(r"[^a-z0-9а-я\s]", " ", stripped)
    return re.sub(r"\s+", " ", stripped).strip()


# ---- composer ------------------------------------------------------------

_TIME_SCAN_RE = re.compile(r"(?:\bв\s+)?(?<![\d.:/-])(\d{1,2}[:.,-]\d{2})(?!\d|[.:/]\d)", re.IGNORECASE)
_DURATION_SCAN_RE = re.compile(
    r"(?:\bна\s+)?(?<![\d.:/-])(\d+(?:ч\d*(?:мин|м)?|мин|м|[.:]\d*(?![\d.:])))",
    re.IGNORECASE,
)
_DATE_WORDS = sorted([*_RELATIVE_DAYS, *_WEEKDAYS], key=len, reverse=True)
_DATE_SCAN_RE = re.compile(
    r"(?:\bна\s+)?(?<!\w)("
    r"\d{4}-\d{1,2}-\d{1,2}"
    r"|\d{1,2}\.\d{1,2}\.\d{2,4}"
    r"|\d{1,2}-\d{1,2}-\d{4}"
    r"|\d{1,2}/\d{1,2}/\d{4}"
    r"|\d{1,2}[./]\d{1,2}"
    rf"|{'|'.join(re.escape(word) for word in _DATE_WORDS)}"
    r")(?!\w)",
    re.IGNORECASE,
)
_LEADING_CONNECTOR_RE = re.compile(r"^(на|в|до)\s+", re.IGNORECASE)
_TRAILING_CONNECTOR_RE = re.compile(r"\s+(на|в|до)\s*$", re.IGNORECASE)


def parse(text: str, today: date) -> EventDraft | None:
    """Parse quick-add text into an EventDraft.

    Returns None only for empty or whitespace-only input; any other text
    yields a draft, possibly with nothing but a title.

    Time is matched first and its whole match (with a leading "в") is cut
    from the title. Duration and date are then located on the input
    text, duration skipping the span taken by a recognized time, and their
    match text is cut from the title established by time. Without a time
    the title is rebuilt from the input text by chained first-match
    removal of all three token patterns.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        return None

    title: str | None = None
    start: str | None = None
    duration: int | None = None
    event_date: str | None = None
    claimed: list[tuple[int, int]] = []

    time_match = _TIME_SCAN_RE.search(cleaned)
    if time_match:
        start = parse_time_input(time_match.group(1))
        if start:
            claimed.append(time_match.span())
            title = cleaned.replace(time_match.group(0), "", 1).strip()

    duration_match = _search_unclaimed(_DURATION_SCAN_RE, cleaned, claimed)
    if duration_match:
        duration = parse_duration_input(duration_match.group(1))
        if duration and title:
            title = title.replace(duration_match.group(0), "", 1).strip()

    date_match = _DATE_SCAN_RE.search(cleaned)
    if date_match:
        event_date = parse_date_input(date_match.group(1), today)
        if event_date and title:
            title = title.replace(date_match.group(0), "", 1).strip()

    if not title:
        title = _TIME_SCAN_RE.sub("", cleaned, count=1)
        title = _DURATION_SCAN_RE.sub("", title, count=1)
        title = _DATE_SCAN_RE.sub("", title, count=1)
        title = title.strip()

    return EventDraft(
        title=_strip_connectors(title),
        start=start,
        date=event_date,
        duration=duration,
    )


def _search_unclaimed(
    pattern: re.Pattern[str],
    text: str,
    claimed: list[tuple[int, int]],
) -> re.Match[str] | None:
    for match in pattern.finditer(text):
        if not any(match.start() < end and begin < match.end() for begin, end in claimed):
            return match
    return None


def _strip_connectors(title: str) -> str:
    if not title:
        return ""
    title = _LEADING_CONNECTOR_RE.sub("", title, count=1)
    title = _TRAILING_CONNECTOR_RE.sub("", title, count=1)
    return re.sub(r"\s+", " ", title).strip()
