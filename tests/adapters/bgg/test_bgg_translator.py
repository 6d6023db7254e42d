from __future__ import annotations

import pytest

from ludex.adapters.bgg.translator import (
    decode_entities,
    is_placeholder,
    parse_collection,
    parse_search,
    parse_thing,
    translate_thing,
)
from ludex.domain.model import Difficulty, PlayTime

CATAN_XML = """<?xml version="1.0" encoding="utf-8"?>
<items termsofuse="https://boardgamegeek.com/xmlapi/termsofuse">
  <item type="boardgame" id="13">
    <thumbnail>https://cf.geekdo-images.com/catan_t.jpg</thumbnail>
    <image>https://cf.geekdo-images.com/catan.jpg</image>
    <name type="primary" sortindex="1" value="CATAN" />
    <name type="alternate" sortindex="1" value="Die Siedler von Catan" />
    <description>Trade &amp; build.&#10;&#10;Settle &quot;the island&quot;.</description>
    <minplayers value="3" />
    <maxplayers value="4" />
    <playingtime value="120" />
    <minage value="10" />
    <link type="boardgamemechanic" id="2072" value="Dice Rolling" />
    <link type="boardgamemechanic" id="2040" value="Hexagon Grid" />
    <link type="boardgamepublisher" id="37" value="KOSMOS" />
    <link type="boardgamepublisher" id="4" value="Mayfair Games" />
    <statistics page="1">
      <ratings>
        <averageweight value="2.3" />
      </ratings>
    </statistics>
  </item>
</items>
"""


def test_parse_thing_reads_known_elements() -> None:
    payload = parse_thing(CATAN_XML, external_id="13")

    assert payload.id == "13"
    assert payload.name == "CATAN"
    assert payload.image == "https://cf.geekdo-images.com/catan.jpg"
    assert payload.description == 'Trade & build.\n\nSettle "the island".'
    assert payload.min_players == 3
    assert payload.max_players == 4
    assert payload.playing_time == 120
    assert payload.min_age == 10
    assert payload.average_weight == pytest.approx(2.3)
    assert payload.mechanics == ["Dice Rolling", "Hexagon Grid"]
    assert payload.publishers == ["KOSMOS", "Mayfair Games"]


def test_translate_thing_buckets_and_picks_first_publisher() -> None:
    result = translate_thing(parse_thing(CATAN_XML, external_id="13"), description_limit=2000)

    assert result.external_id == "13"
    assert result.title == "CATAN"
    assert result.suggested_age == "10+"
    assert result.play_time == PlayTime.OVER_60
    assert result.difficulty == Difficulty.MEDIUM
    assert result.mechanics == ("Dice Rolling", "Hexagon Grid")
    assert result.publisher == "KOSMOS"
    assert result.is_stub is False


def test_description_is_truncated() -> None:
    result = translate_thing(parse_thing(CATAN_XML, external_id="13"), description_limit=5)

    assert result.description == "Trade"


def test_sparse_item_translates_to_unknowns() -> None:
    body = '<items><item type="boardgame" id="7"><averageweight value="0" /></item></items>'

    result = translate_thing(parse_thing(body, external_id="7"), description_limit=2000)

    assert result.is_stub is True


@pytest.mark.parametrize(
    "body",
    [
        "<message>Your request for this collection has been accepted</message>",
        "<items><item id='1'>Please try again later</item></items>",
        "<items></items>",
        "",
    ],
)
def test_placeholder_bodies_are_recognised(body: str) -> None:
    assert is_placeholder(body) is True


def test_item_body_is_not_a_placeholder() -> None:
    assert is_placeholder(CATAN_XML) is False


def test_parse_search_takes_first_hit() -> None:
    body = (
        '<items total="2"><item type="boardgame" id="13"><name value="CATAN"/></item>'
        '<item type="boardgame" id="27710"><name value="Catan Dice Game"/></item></items>'
    )

    hit = parse_search(body)

    assert hit is not None
    assert hit.id == "13"
    assert parse_search('<items total="0"></items>') is None


def test_parse_collection_reads_ids_and_names() -> None:
    body = (
        '<items totalitems="2">'
        '<item objecttype="thing" objectid="13" subtype="boardgame" collid="1">'
        '<name sortindex="1">CATAN</name><status own="1" /></item>'
        '<item objecttype="thing" objectid="822" subtype="boardgame" collid="2">'
        '<name sortindex="1"> Carcassonne &amp; Friends </name><status own="1" /></item>'
        "</items>"
    )

    items = parse_collection(body)

    assert [(item.object_id, item.name) for item in items] == [
        ("13", "CATAN"),
        ("822", "Carcassonne & Friends"),
    ]


def test_decode_entities_handles_double_escaping_order() -> None:
    assert decode_entities("&amp;lt;b&amp;gt;") == "<b>"
    assert decode_entities("Tom &#39;n&#39; Jerry") == "Tom 'n' Jerry"
