"""Public domain model surface."""

from __future__ import annotations

from ludex.domain.model.catalog import (
    DEFAULT_DIFFICULTY,
    DEFAULT_GAME_TYPE,
    DEFAULT_MAX_PLAYERS,
    DEFAULT_MIN_PLAYERS,
    DEFAULT_PLAY_TIME,
    Game,
    GameAdminData,
    GameMechanic,
    Library,
    Mechanic,
    Publisher,
)
from ludex.domain.model.entity import Entity
from ludex.domain.model.enums import Difficulty, EntityType, GameType, ImportJobStatus, PlayTime
from ludex.domain.model.jobs import ImportJob

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    # catalog
    "Library",
    "Game",
    "Publisher",
    "Mechanic",
    "GameMechanic",
    "GameAdminData",
    # jobs
    "ImportJob",
    # enums
    "Difficulty",
    "EntityType",
    "GameType",
    "ImportJobStatus",
    "PlayTime",
    # defaults
    "DEFAULT_DIFFICULTY",
    "DEFAULT_GAME_TYPE",
    "DEFAULT_MAX_PLAYERS",
    "DEFAULT_MIN_PLAYERS",
    "DEFAULT_PLAY_TIME",
]
