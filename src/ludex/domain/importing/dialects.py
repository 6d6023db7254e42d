"""Column-vocabulary reconciliation for tabular imports.

A batch is either a *standard* export using our own column names or a *BGG
export* (BoardGameGeek's collection CSV). The dialect is chosen once per file
from the header set; row mapping is then a pure function of that choice.

Detection keys off a single marker column (``objectname``). A standard file that
happens to carry such a column would be read as a BGG export; this is a known
limitation of marker-based detection.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .coercion import (
    build_notes,
    coerce_play_time,
    compose_description,
    parse_bool,
    parse_date,
    parse_int,
    parse_optional_bool,
    parse_price,
    split_names,
    weight_to_difficulty,
)
from .descriptor import ItemDescriptor

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from .tabular import RawRow

log = getLogger(__name__)

BGG_BOARDGAME_URL: Final[str] = "https://boardgamegeek.com/boardgame/{id}"
TITLE_ALIASES: Final[tuple[str, ...]] = (
    "title",
    "name",
    "game",
    "game_name",
    "game_title",
    "objectname",
)
_REFERENCE_ID = re.compile(r"boardgame(?:expansion)?/(\d+)")
_BARE_ID = re.compile(r"^\d+$")


@dataclass(frozen=True, slots=True)
class Dialect:
    """A named column vocabulary with its detection and row-inclusion predicates."""

    name: str
    matches: Callable[[frozenset[str]], bool]
    includes: Callable[[RawRow], bool]


def _always(_: object) -> bool:
    return True


def _has_bgg_marker(headers: frozenset[str]) -> bool:
    return "objectname" in headers


def _is_owned(row: RawRow) -> bool:
    return row.get("own") == "1"


STANDARD: Final[Dialect] = Dialect(name="standard", matches=_always, includes=_always)
BGG_EXPORT: Final[Dialect] = Dialect(name="bgg_export", matches=_has_bgg_marker, includes=_is_owned)

# Checked in order; the fallback must stay last.
DIALECTS: Final[tuple[Dialect, ...]] = (BGG_EXPORT, STANDARD)


def detect_dialect(headers: Iterable[str]) -> Dialect:
    header_set = frozenset(headers)
    return next(dialect for dialect in DIALECTS if dialect.matches(header_set))


def map_rows(rows: Sequence[RawRow]) -> list[ItemDescriptor]:
    """Map decoded rows to descriptors, dropping excluded and untitled rows silently."""

    if not rows:
        return []
    dialect = detect_dialect(rows[0].headers)
    log.info("Tabular format detected: %s (%d rows)", dialect.name, len(rows))

    descriptors: list[ItemDescriptor] = []
    for row in rows:
        if not dialect.includes(row):
            continue
        descriptor = map_row(row)
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors


def map_row(row: RawRow) -> ItemDescriptor | None:
    title = row.first(*TITLE_ALIASES)
    if not title:
        return None

    external_id = row.first("bgg_id", "objectid") or None
    is_expansion = (
        parse_bool(row.get("is_expansion"))
        or row.get("itemtype") == "expansion"
        or row.get("objecttype") == "expansion"
    )
    difficulty = row.get("difficulty") or weight_to_difficulty(row.first("avgweight", "weight"))
    description = row.get("description").strip()
    notes = build_notes(
        row.first("privatecomment", "private_comment"),
        row.first("comment", "notes"),
    )

    return ItemDescriptor(
        title=title,
        external_id=external_id,
        external_url=(
            BGG_BOARDGAME_URL.format(id=external_id)
            if external_id
            else row.first("bgg_url", "url") or None
        ),
        game_type=row.first("type", "game_type") or None,
        difficulty=difficulty or None,
        play_time=coerce_play_time(row.first("play_time", "playtime", "playingtime")),
        min_players=parse_int(row.first("min_players", "minplayers")),
        max_players=parse_int(row.first("max_players", "maxplayers")),
        suggested_age=row.first("suggested_age", "age", "bggrecagerange") or None,
        publisher=row.get("publisher") or None,
        mechanics=split_names(row.first("mechanics", "mechanic")),
        is_expansion=is_expansion,
        parent_title=row.get("parent_game") or None,
        is_coming_soon=parse_optional_bool(row.get("is_coming_soon")),
        is_for_sale=parse_optional_bool(row.first("is_for_sale", "fortrade")),
        sale_price=parse_price(row.get("sale_price")),
        sale_condition=row.get("sale_condition") or None,
        location_room=row.get("location_room") or None,
        location_shelf=row.first("location_shelf", "invlocation") or None,
        location_misc=row.get("location_misc") or None,
        sleeved=parse_optional_bool(row.get("sleeved")),
        upgraded_components=parse_optional_bool(row.get("upgraded_components")),
        crowdfunded=parse_optional_bool(row.get("crowdfunded")),
        inserts=parse_optional_bool(row.get("inserts")),
        in_base_game_box=parse_bool(row.get("in_base_game_box")),
        description=compose_description(description, notes),
        image_url=row.first("image_url", "imageurl") or None,
        purchase_date=parse_date(
            row.first("acquisitiondate", "acquisition_date", "purchase_date")
        ),
        purchase_price=parse_price(row.first("pricepaid", "price_paid", "purchase_price")),
        source_description=description,
        source_notes=notes,
    )


def descriptors_from_references(references: Iterable[str]) -> list[ItemDescriptor]:
    """Build title-less descriptors from BGG links (or bare numeric ids)."""

    descriptors: list[ItemDescriptor] = []
    for reference in references:
        candidate = reference.strip()
        match = _REFERENCE_ID.search(candidate)
        if match is not None:
            external_id = match.group(1)
            url = candidate
        elif _BARE_ID.match(candidate):
            external_id = candidate
            url = BGG_BOARDGAME_URL.format(id=candidate)
        else:
            log.debug("Ignoring unrecognised reference %r", reference)
            continue
        descriptors.append(ItemDescriptor(external_id=external_id, external_url=url))
    return descriptors
