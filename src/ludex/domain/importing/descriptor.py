"""Typed descriptors flowing through the import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

# ``None`` means "not supplied" throughout; an empty string is an explicit blank.
# Both count as absent for merge precedence (see ``coercion.is_blank``).


@dataclass(slots=True, kw_only=True)
class ItemDescriptor:
    """Canonical representation of one importable item.

    ``source_description`` and ``source_notes`` are import-only scratch fields:
    they remember what the input itself said so that enrichment can never replace
    a user-authored description. They are never persisted.
    """

    title: str = ""
    external_id: str | None = None
    external_url: str | None = None
    game_type: str | None = None
    difficulty: str | None = None
    play_time: str | None = None
    min_players: int | None = None
    max_players: int | None = None
    suggested_age: str | None = None
    publisher: str | None = None
    mechanics: list[str] = field(default_factory=list[str])
    is_expansion: bool = False
    parent_title: str | None = None

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
    in_base_game_box: bool = False

    description: str | None = None
    image_url: str | None = None
    purchase_date: str | None = None
    purchase_price: float | None = None

    source_description: str = ""
    source_notes: str | None = None

    @property
    def label(self) -> str:
        """Human-readable handle for logs and error messages."""

        return self.title or self.external_id or "<untitled>"


@dataclass(frozen=True, slots=True, kw_only=True)
class EnrichmentResult:
    """Supplementary metadata fetched for one external reference id.

    Absent fields are ``None`` ("unknown"), never an empty string.
    """

    external_id: str
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    min_players: int | None = None
    max_players: int | None = None
    suggested_age: str | None = None
    play_time: str | None = None
    difficulty: str | None = None
    mechanics: tuple[str, ...] | None = None
    publisher: str | None = None

    @classmethod
    def stub(cls, external_id: str) -> EnrichmentResult:
        return cls(external_id=external_id)

    @property
    def is_stub(self) -> bool:
        return all(
            value is None
            for value in (
                self.title,
                self.description,
                self.image_url,
                self.min_players,
                self.max_players,
                self.suggested_age,
                self.play_time,
                self.difficulty,
                self.mechanics,
                self.publisher,
            )
        )
