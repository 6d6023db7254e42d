"""Scrape BGG XML bodies into payload models and translate them to enrichment results."""

from __future__ import annotations

import re
from typing import Final

from ludex.domain.importing.coercion import minutes_to_play_time, weight_to_difficulty
from ludex.domain.importing.descriptor import EnrichmentResult

from .schema import BggCollectionItem, BggSearchHit, BggThingPayload

PLACEHOLDER_MARKERS: Final[tuple[str, ...]] = (
    "Please try again later",
    "Your request has been accepted",
    "<message>",
)

_NAME = re.compile(r'<name[^>]*type="primary"[^>]*value="([^"]+)"')
_IMAGE = re.compile(r"<image>([^<]+)</image>")
_DESCRIPTION = re.compile(r"<description>([\s\S]*?)</description>")
_NUMERIC_FIELDS: Final[dict[str, re.Pattern[str]]] = {
    tag: re.compile(rf'<{tag}[^>]*value="(\d+)"')
    for tag in ("minplayers", "maxplayers", "minage", "playingtime")
}
_WEIGHT = re.compile(r'<averageweight[^>]*value="(\d+(?:\.\d+)?)"')
_MECHANIC = re.compile(r'<link[^>]*type="boardgamemechanic"[^>]*value="([^"]+)"')
_PUBLISHER = re.compile(r'<link[^>]*type="boardgamepublisher"[^>]*value="([^"]+)"')
_SEARCH_ITEM = re.compile(r'<item[^>]*id="(\d+)"')
_COLLECTION_ITEM = re.compile(
    r'<item[^>]*objectid="(\d+)"[^>]*>[\s\S]*?<name[^>]*>([^<]+)</name>[\s\S]*?</item>'
)

# Applied in order; ``&amp;`` is undone before the escapes it may have produced.
_ENTITIES: Final[tuple[tuple[str, str], ...]] = (
    ("&#10;", "\n"),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def decode_entities(text: str) -> str:
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return text


def is_placeholder(body: str) -> bool:
    """Return whether ``body`` is a "still processing" answer rather than item data."""

    return any(marker in body for marker in PLACEHOLDER_MARKERS) or "<item" not in body


def parse_thing(body: str, *, external_id: str) -> BggThingPayload:
    raw: dict[str, object] = {"id": external_id}
    if match := _NAME.search(body):
        raw["name"] = decode_entities(match.group(1))
    if match := _IMAGE.search(body):
        raw["image"] = match.group(1).strip()
    if match := _DESCRIPTION.search(body):
        raw["description"] = decode_entities(match.group(1))
    for tag, pattern in _NUMERIC_FIELDS.items():
        if match := pattern.search(body):
            raw[tag] = match.group(1)
    if match := _WEIGHT.search(body):
        raw["averageweight"] = match.group(1)
    raw["mechanics"] = [decode_entities(value) for value in _MECHANIC.findall(body)]
    raw["publishers"] = [decode_entities(value) for value in _PUBLISHER.findall(body)]
    return BggThingPayload.model_validate(raw)


def parse_search(body: str) -> BggSearchHit | None:
    match = _SEARCH_ITEM.search(body)
    if match is None:
        return None
    return BggSearchHit(id=match.group(1))


def parse_collection(body: str) -> list[BggCollectionItem]:
    return [
        BggCollectionItem(object_id=object_id, name=decode_entities(name.strip()))
        for object_id, name in _COLLECTION_ITEM.findall(body)
    ]


def translate_thing(payload: BggThingPayload, *, description_limit: int) -> EnrichmentResult:
    description = payload.description[:description_limit] if payload.description else None
    return EnrichmentResult(
        external_id=payload.id,
        title=payload.name or None,
        description=description or None,
        image_url=payload.image or None,
        min_players=payload.min_players,
        max_players=payload.max_players,
        suggested_age=f"{payload.min_age}+" if payload.min_age is not None else None,
        play_time=minutes_to_play_time(payload.playing_time),
        difficulty=weight_to_difficulty(payload.average_weight),
        mechanics=tuple(payload.mechanics) if payload.mechanics else None,
        publisher=payload.publishers[0] if payload.publishers else None,
    )
