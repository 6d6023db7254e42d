"""BoardGameGeek XML API 2 payload schemas.

The XML is scraped with regular expressions (see ``translator``) into plain
dicts keyed by BGG's element names; these models validate and type them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

type BggId = str


class BggBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BggThingPayload(BggBaseModel):
    """One ``<item>`` of a ``thing`` response. Every field may be missing."""

    id: BggId
    name: str | None = None
    description: str | None = None
    image: str | None = None
    min_players: int | None = Field(default=None, alias="minplayers")
    max_players: int | None = Field(default=None, alias="maxplayers")
    min_age: int | None = Field(default=None, alias="minage")
    playing_time: int | None = Field(default=None, alias="playingtime")
    average_weight: float | None = Field(default=None, alias="averageweight")
    mechanics: list[str] = Field(default_factory=list[str])
    publishers: list[str] = Field(default_factory=list[str])


class BggSearchHit(BggBaseModel):
    id: BggId


class BggCollectionItem(BggBaseModel):
    object_id: BggId = Field(alias="objectid")
    name: str
