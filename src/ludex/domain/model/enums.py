"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    LIBRARY = "library"
    GAME = "game"
    PUBLISHER = "publisher"
    MECHANIC = "mechanic"
    GAME_MECHANIC = "game_mechanic"
    GAME_ADMIN_DATA = "game_admin_data"
    IMPORT_JOB = "import_job"


class Difficulty(StrEnum):
    LIGHT = "1 - Light"
    MEDIUM_LIGHT = "2 - Medium Light"
    MEDIUM = "3 - Medium"
    MEDIUM_HEAVY = "4 - Medium Heavy"
    HEAVY = "5 - Heavy"


class PlayTime(StrEnum):
    UP_TO_15 = "0-15 Minutes"
    UP_TO_30 = "15-30 Minutes"
    UP_TO_45 = "30-45 Minutes"
    UP_TO_60 = "45-60 Minutes"
    OVER_60 = "60+ Minutes"
    OVER_2_HOURS = "2+ Hours"
    OVER_3_HOURS = "3+ Hours"


class GameType(StrEnum):
    BOARD_GAME = "Board Game"
    CARD_GAME = "Card Game"
    DICE_GAME = "Dice Game"
    PARTY_GAME = "Party Game"
    WAR_GAME = "War Game"
    MINIATURES = "Miniatures"
    RPG = "RPG"
    OTHER = "Other"


class ImportJobStatus(StrEnum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
