"""Field-level precedence when combining local descriptors with enrichment data."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from .coercion import compose_description, is_blank

if TYPE_CHECKING:
    from .descriptor import EnrichmentResult, ItemDescriptor

log = getLogger(__name__)

# Scalars shared by both types; filled only while the local value is blank.
_FILLABLE_FIELDS: Final[tuple[str, ...]] = (
    "title",
    "image_url",
    "difficulty",
    "play_time",
    "min_players",
    "max_players",
    "suggested_age",
    "publisher",
)


def merge_enrichment(
    descriptor: ItemDescriptor,
    enrichment: EnrichmentResult | None,
) -> ItemDescriptor:
    """Fill absent descriptor fields from ``enrichment`` in place and return it.

    Present local values always win, including placeholders. A description the
    input supplied itself is kept verbatim (plus notes); only when the input had
    none does the enrichment description take its place.
    """

    if enrichment is None:
        return descriptor

    for name in _FILLABLE_FIELDS:
        incoming = getattr(enrichment, name)
        if incoming is not None and is_blank(getattr(descriptor, name)):
            setattr(descriptor, name, incoming)

    if not descriptor.mechanics and enrichment.mechanics:
        descriptor.mechanics = list(enrichment.mechanics)

    if descriptor.source_description.strip():
        descriptor.description = compose_description(
            descriptor.source_description, descriptor.source_notes
        )
    else:
        merged = compose_description(enrichment.description, descriptor.source_notes)
        if not is_blank(merged):
            descriptor.description = merged

    log.debug(
        "Merged enrichment for %r: image=%s, description=%d chars",
        descriptor.label,
        descriptor.image_url is not None,
        len(descriptor.description or ""),
    )
    return descriptor
