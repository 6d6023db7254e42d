"""Catalog entities: libraries, games and their lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from ludex.domain.model.entity import Entity
from ludex.domain.model.enums import Difficulty, EntityType, GameType, PlayTime

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

DEFAULT_MIN_PLAYERS = 2
DEFAULT_MAX_PLAYERS = 4
DEFAULT_PLAY_TIME = PlayTime.UP_TO_60
DEFAULT_DIFFICULTY = Difficulty.MEDIUM
DEFAULT_GAME_TYPE = GameType.BOARD_GAME


@dataclass(eq=False, kw_only=True)
class Library(Entity):
    """Target collection that owns games. Titles and slugs are unique per library."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.LIBRARY

    name: str
    owner_id: str | None = None


@dataclass(eq=False, kw_only=True)
class Publisher(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PUBLISHER

    name: str


@dataclass(eq=False, kw_only=True)
class Mechanic(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MECHANIC

    name: str


@dataclass(eq=False, kw_only=True)
class Game(Entity):
    """Canonical catalog record created by an import."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GAME

    library_id: UUID
    title: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    bgg_id: str | None = None
    bgg_url: str | None = None

    min_players: int = DEFAULT_MIN_PLAYERS
    max_players: int = DEFAULT_MAX_PLAYERS
    suggested_age: str | None = None
    play_time: str = DEFAULT_PLAY_TIME
    difficulty: str = DEFAULT_DIFFICULTY
    game_type: str = DEFAULT_GAME_TYPE

    publisher_id: UUID | None = None
    is_expansion: bool = False
    parent_game_id: UUID | None = None

    is_coming_soon: bool = False
    is_for_sale: bool = False
    sale_price: float | None = None
    sale_condition: str | None = None
    location_room: str | None = None
    location_shelf: str | None = None
    location_misc: str | None = None
    sleeved: bool = False
    upgraded_components: bool = False
    crowdfunded: bool = False
    inserts: bool = False
    in_base_game_box: bool = False


@dataclass(eq=False, kw_only=True)
class GameMechanic(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GAME_MECHANIC

    game_id: UUID
    mechanic_id: UUID


@dataclass(eq=False, kw_only=True)
class GameAdminData(Entity):
    """Owner-only purchase metadata kept apart from the public record."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GAME_ADMIN_DATA

    game_id: UUID
    purchase_date: date | None = None
    purchase_price: float | None = None
