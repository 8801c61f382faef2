from __future__ import annotations

from datetime import date

import pytest

from organizer.core.event_parser import extract_tags, parse
from organizer.core.models import EventDraft


@pytest.mark.parametrize("value", ["", "   ", "\t\n"])
def test_empty_input_yields_no_draft(today: date, value: str) -> None:
    assert parse(value, today) is None


def test_plain_text_is_returned_as_title(today: date) -> None:
    assert parse("  купить хлеб  ", today) == EventDraft(title="купить хлеб")


@pytest.mark.parametrize(
    "value",
    [
        "Встреча в 14:30 завтра",
        "Обед 1.5",
        "25:61 встреча",
        "Практика фортепиано 9:00-10:30 #техника",
    ],
)
def test_parse_is_pure(today: date, value: str) -> None:
    assert parse(value, today) == parse(value, today)


def test_time_date_and_title(today: date) -> None:
    draft = parse("Встреча в 14:30 завтра", today)
    assert draft == EventDraft(title="Встреча", start="14:30", date="2024-06-16")


def test_uppercase_time_marker_is_stripped(today: date) -> None:
    draft = parse("В 9:00 зарядка", today)
    assert draft is not None
    assert draft.start == "09:00"
    assert draft.title == "зарядка"


def test_out_of_range_time_is_folded_into_title(today: date) -> None:
    draft = parse("25:61 встреча", today)
    assert draft is not None
    assert draft.start is None
    assert "встреча" in draft.title


def test_rejected_time_does_not_fall_through_to_a_later_one(today: date) -> None:
    draft = parse("25:61 встреча 10:00", today)
    assert draft is not None
    assert draft.start is None
    assert "встреча" in draft.title


def test_huge_duration_numbers_do_not_raise(today: date) -> None:
    decimal = parse("Обед " + "1" * 400 + ".5", today)
    assert decimal is not None
    assert decimal.title == "Обед"
    assert decimal.duration == int("1" * 400) * 60 + 30

    minutes = parse("Обед " + "1" * 5000 + "м", today)
    assert minutes is not None
    assert minutes.title == "Обед"
    assert minutes.duration is None


def test_internal_whitespace_is_collapsed(today: date) -> None:
    assert parse("купить   хлеб", today) == EventDraft(title="купить хлеб")
    assert parse("Обед  13:00  с  Машей", today) == EventDraft(title="Обед с Машей", start="13:00")


def test_time_range_keeps_tail_in_title(today: date) -> None:
    text = "Практика фортепиано 9:00-10:30 #техника"
    draft = parse(text, today)
    assert draft is not None
    assert draft.start == "09:00"
    assert draft.end is None
    assert "Практика фортепиано" in draft.title
    assert draft.tags is None
    assert extract_tags(text) == ["техника"]


def test_decimal_duration(today: date) -> None:
    draft = parse("Обед 1.5", today)
    assert draft is not None
    assert draft.duration == 90
    assert draft.title == "Обед"


def test_duration_with_marker_is_cut_from_title(today: date) -> None:
    draft = parse("Репетиция 18:00 на 2ч", today)
    assert draft == EventDraft(title="Репетиция", start="18:00", duration=120)


def test_duration_does_not_reread_the_time_token(today: date) -> None:
    draft = parse("Практика 9:00 1ч", today)
    assert draft is not None
    assert draft.start == "09:00"
    assert draft.duration == 60
    assert draft.title == "Практика"


def test_full_date_is_not_mistaken_for_time(today: date) -> None:
    draft = parse("Концерт 25.12.2024 19:00", today)
    assert draft == EventDraft(title="Концерт", start="19:00", date="2024-12-25")


def test_weekday_and_english_keywords(today: date) -> None:
    assert parse("Созвон пятница 11:00", today) == EventDraft(
        title="Созвон", start="11:00", date="2024-06-21"
    )
    assert parse("Meeting tomorrow 10:30", today) == EventDraft(
        title="Meeting", start="10:30", date="2024-06-16"
    )


def test_date_with_marker_is_cut_from_title(today: date) -> None:
    draft = parse("Обед на завтра 13:00", today)
    assert draft == EventDraft(title="Обед", start="13:00", date="2024-06-16")


def test_date_without_time_uses_fallback_title(today: date) -> None:
    draft = parse("День рождения 31.12", today)
    assert draft is not None
    assert draft.start is None
    assert draft.date == "2024-12-31"
    assert draft.title == "День рождения"


def test_day_month_token_is_read_as_time_and_date(today: date) -> None:
    draft = parse("Новый год 01.01", today)
    assert draft == EventDraft(title="Новый год", start="01:01", date="2025-01-01")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("до 19:00 сдать отчёт", "сдать отчёт"),
        ("Встреча на 10:00", "Встреча"),
        ("в 8:00 пробежка в", "пробежка"),
    ],
)
def test_connector_words_are_trimmed(today: date, value: str, expected: str) -> None:
    draft = parse(value, today)
    assert draft is not None
    assert draft.title == expected


def test_only_first_occurrence_of_a_token_is_removed(today: date) -> None:
    draft = parse("Обед 13:00 завтра и завтра", today)
    assert draft == EventDraft(title="Обед и завтра", start="13:00", date="2024-06-16")


def test_title_paths_diverge_on_unrecognized_tokens(today: date) -> None:
    # without a time the title is rebuilt by pattern removal, which also
    # drops a token the duration recognizer rejected
    fallback = parse("Поход 3.", today)
    assert fallback == EventDraft(title="Поход")
    # with a time the same unrecognized token stays in the title
    primary = parse("Поход 10:00 3.", today)
    assert primary is not None
    assert primary.start == "10:00"
    assert primary.duration is None
    assert primary.title == "Поход 3."


def test_time_only_input_has_empty_title(today: date) -> None:
    draft = parse("14:30", today)
    assert draft == EventDraft(title="", start="14:30")


def test_end_is_never_synthesized(today: date) -> None:
    draft = parse("Урок 14:00 45м", today)
    assert draft is not None
    assert draft.start == "14:00"
    assert draft.duration == 45
    assert draft.end is None
