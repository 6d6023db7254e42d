"""Pure conversions from free-text cells to typed values.

Every function here is total: malformed input yields ``None`` (or ``False`` for
booleans) rather than an exception.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING, Final

from ludex.domain.model import Difficulty, PlayTime

if TYPE_CHECKING:
    from collections.abc import Iterable

TRUTHY_TOKENS: Final[frozenset[str]] = frozenset({"true", "yes", "1"})
NOTES_PREFIX: Final[str] = "**Notes:**"

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")
_PRICE_NOISE = re.compile(r"[^0-9.,]")
_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

# Upper bounds are exclusive for weights and inclusive for minutes.
_DIFFICULTY_THRESHOLDS: Final[tuple[tuple[float, Difficulty], ...]] = (
    (1.5, Difficulty.LIGHT),
    (2.25, Difficulty.MEDIUM_LIGHT),
    (3.0, Difficulty.MEDIUM),
    (3.75, Difficulty.MEDIUM_HEAVY),
)
_PLAY_TIME_THRESHOLDS: Final[tuple[tuple[int, PlayTime], ...]] = (
    (15, PlayTime.UP_TO_15),
    (30, PlayTime.UP_TO_30),
    (45, PlayTime.UP_TO_45),
    (60, PlayTime.UP_TO_60),
    (120, PlayTime.OVER_60),
    (180, PlayTime.OVER_2_HOURS),
)
_PLAY_TIME_LABELS: Final[frozenset[str]] = frozenset(label.value for label in PlayTime)


def is_blank(value: object) -> bool:
    """Return whether ``value`` counts as absent for merge precedence.

    ``None`` is blank; strings are blank when they trim to ``""`` or to the word
    ``null`` (any case). Any other type is never blank, whatever its value.
    """

    if value is None:
        return True
    if not isinstance(value, str):
        return False
    stripped = value.strip()
    return stripped == "" or stripped.lower() == "null"


def parse_bool(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in TRUTHY_TOKENS


def parse_optional_bool(value: str | None) -> bool | None:
    """Like :func:`parse_bool` but keeps "not supplied" distinct from false."""

    if value is None or not value.strip():
        return None
    return parse_bool(value)


def parse_int(value: str | None) -> int | None:
    if not value:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def parse_float(value: str | None) -> float | None:
    if not value:
        return None
    match = _LEADING_FLOAT.match(value)
    if match is None:
        return None
    return float(match.group(1))


def parse_price(value: str | None) -> float | None:
    if not value:
        return None
    cleaned = _PRICE_NOISE.sub("", value).replace(",", ".", 1)
    return parse_float(cleaned)


def parse_date(value: str | None) -> str | None:
    """Return ``value`` as ``YYYY-MM-DD`` or ``None`` when it cannot be parsed."""

    if not value:
        return None
    candidate = value.strip()
    if _ISO_DATE.match(candidate):
        return candidate
    try:
        return datetime.fromisoformat(candidate).date().isoformat()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date().isoformat()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def weight_to_difficulty(weight: str | float | None) -> Difficulty | None:
    """Bucket a complexity weight. ``0`` means "not rated" and yields ``None``."""

    score = parse_float(weight) if isinstance(weight, str) else weight
    if score is None or score == 0:
        return None
    for upper, label in _DIFFICULTY_THRESHOLDS:
        if score < upper:
            return label
    return Difficulty.HEAVY


def minutes_to_play_time(minutes: int | None) -> PlayTime | None:
    if not minutes:
        return None
    for upper, label in _PLAY_TIME_THRESHOLDS:
        if minutes <= upper:
            return label
    return PlayTime.OVER_3_HOURS


def coerce_play_time(value: str | None) -> str | None:
    """Accept an existing play-time label verbatim, else bucket a minute count."""

    if not value:
        return None
    if value in _PLAY_TIME_LABELS:
        return value
    return minutes_to_play_time(parse_int(value))


def build_notes(private_comment: str | None, comment: str | None) -> str | None:
    """Join the public then the private comment with a blank line, skipping empties."""

    parts = [part.strip() for part in (comment, private_comment) if part and part.strip()]
    return "\n\n".join(parts) if parts else None


def compose_description(description: str | None, notes: str | None) -> str | None:
    desc = description.strip() if description else ""
    note_text = notes.strip() if notes else ""
    if not desc and not note_text:
        return None
    if not note_text:
        return desc
    if not desc:
        return f"{NOTES_PREFIX} {note_text}"
    return f"{desc}\n\n{NOTES_PREFIX} {note_text}"


def split_names(value: str | None, *, separator: str = ";") -> list[str]:
    """Split a list cell, trimming and dropping duplicates while keeping first-seen order."""

    if not value:
        return []
    return unique_names(part.strip() for part in value.split(separator))


def unique_names(names: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if not name or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result
