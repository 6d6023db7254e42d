"""Job submission types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class ImportMode(StrEnum):
    CSV = "csv"
    BGG_LINKS = "bgg_links"
    BGG_COLLECTION = "bgg_collection"


@dataclass(frozen=True, slots=True)
class ImportDefaults:
    """Values applied to every item that does not supply its own."""

    is_coming_soon: bool | None = None
    is_for_sale: bool | None = None
    sale_price: float | None = None
    sale_condition: str | None = None
    location_room: str | None = None
    location_shelf: str | None = None
    location_misc: str | None = None
    sleeved: bool | None = None
    upgraded_components: bool | None = None
    crowdfunded: bool | None = None
    inserts: bool | None = None


@dataclass(frozen=True, slots=True)
class ImportRequest:
    mode: ImportMode
    library_id: UUID
    csv_data: str | None = None
    references: tuple[str, ...] = ()
    bgg_username: str | None = None
    enhance_with_bgg: bool = True
    defaults: ImportDefaults = field(default_factory=ImportDefaults)


@dataclass(frozen=True, slots=True)
class ImportProgress:
    """Progress snapshot handed to an optional observer after each step."""

    phase: str
    current: int
    total: int
    imported: int
    failed: int
    current_item: str | None = None
