from __future__ import annotations

import pytest

from ludex.domain.importing.coercion import (
    build_notes,
    coerce_play_time,
    compose_description,
    is_blank,
    minutes_to_play_time,
    parse_bool,
    parse_date,
    parse_int,
    parse_optional_bool,
    parse_price,
    split_names,
    weight_to_difficulty,
)
from ludex.domain.model import Difficulty, PlayTime


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, True),
        ("", True),
        ("   ", True),
        ("NULL", True),
        (" null ", True),
        ("x", False),
        (0, False),
    ],
)
def test_is_blank(value: object, expected: bool) -> None:
    assert is_blank(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("YES", True), (" 1 ", True), ("no", False), ("", False), (None, False)],
)
def test_parse_bool(value: str | None, expected: bool) -> None:
    assert parse_bool(value) is expected


def test_parse_optional_bool_keeps_absence_distinct() -> None:
    assert parse_optional_bool(None) is None
    assert parse_optional_bool("  ") is None
    assert parse_optional_bool("false") is False
    assert parse_optional_bool("Yes") is True


def test_parse_int_reads_leading_integer() -> None:
    assert parse_int("4") == 4
    assert parse_int(" 12 players") == 12
    assert parse_int("abc") is None
    assert parse_int(None) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [("$45.00", 45.0), ("12,99 €", 12.99), ("free", None), ("", None)],
)
def test_parse_price(value: str, expected: float | None) -> None:
    assert parse_price(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2023-05-01", "2023-05-01"),
        ("2023-05-01T10:30:00", "2023-05-01"),
        ("2023/05/01", "2023-05-01"),
        ("05/01/2023", "2023-05-01"),
        ("May 1, 2023", "2023-05-01"),
        ("sometime", None),
        (None, None),
    ],
)
def test_parse_date(value: str | None, expected: str | None) -> None:
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    ("weight", "expected"),
    [
        ("0", None),
        (0.0, None),
        (1.2, Difficulty.LIGHT),
        (1.5, Difficulty.MEDIUM_LIGHT),
        (2.9, Difficulty.MEDIUM),
        (3.0, Difficulty.MEDIUM_HEAVY),
        ("3.75", Difficulty.HEAVY),
        (None, None),
    ],
)
def test_weight_to_difficulty(weight: str | float | None, expected: Difficulty | None) -> None:
    assert weight_to_difficulty(weight) == expected


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [
        (None, None),
        (0, None),
        (15, PlayTime.UP_TO_15),
        (16, PlayTime.UP_TO_30),
        (45, PlayTime.UP_TO_45),
        (60, PlayTime.UP_TO_60),
        (90, PlayTime.OVER_60),
        (180, PlayTime.OVER_2_HOURS),
        (240, PlayTime.OVER_3_HOURS),
    ],
)
def test_minutes_to_play_time(minutes: int | None, expected: PlayTime | None) -> None:
    assert minutes_to_play_time(minutes) == expected


def test_coerce_play_time_accepts_labels_and_minutes() -> None:
    assert coerce_play_time("2+ Hours") == "2+ Hours"
    assert coerce_play_time("90 min") == PlayTime.OVER_60
    assert coerce_play_time("soon") is None


def test_notes_and_description_composition() -> None:
    notes = build_notes(private_comment="Missing one tile", comment="Family favourite")

    assert notes == "Family favourite\n\nMissing one tile"
    assert compose_description("Great game.", notes) == (
        "Great game.\n\n**Notes:** Family favourite\n\nMissing one tile"
    )
    assert compose_description(None, "Only notes") == "**Notes:** Only notes"
    assert compose_description("  Only text ", None) == "Only text"
    assert compose_description(" ", None) is None
    assert build_notes(None, "  ") is None


def test_split_names_trims_and_deduplicates() -> None:
    assert split_names(" Dice Rolling ;Drafting;; Dice Rolling") == ["Dice Rolling", "Drafting"]
    assert split_names(None) == []
