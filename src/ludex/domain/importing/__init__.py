"""Bulk import pipeline.

Rows or references are decoded into :class:`ItemDescriptor` values, optionally
merged with enrichment data, and persisted one item at a time by
:class:`ImportOrchestrator`. Everything here is adapter-free; persistence and
enrichment are reached through the ports in :mod:`ludex.domain.ports`.
"""

from __future__ import annotations

from .descriptor import EnrichmentResult, ItemDescriptor
from .dialects import (
    BGG_EXPORT,
    STANDARD,
    Dialect,
    descriptors_from_references,
    detect_dialect,
    map_rows,
)
from .lookups import LookupResolutionError, LookupResolver
from .merge import merge_enrichment
from .orchestrator import ImportOrchestrator, ImportRequestError
from .outcomes import (
    FailureCategory,
    ImportJobResult,
    ImportOutcome,
    ItemCreated,
    ItemFailed,
    ItemSkipped,
)
from .request import ImportDefaults, ImportMode, ImportProgress, ImportRequest
from .slugs import assign_unique_slug, base_slug, slugify, unique_slug_among
from .tabular import RawRow, decode_rows, normalize_header

__all__ = [
    "BGG_EXPORT",
    "STANDARD",
    "Dialect",
    "EnrichmentResult",
    "FailureCategory",
    "ImportDefaults",
    "ImportJobResult",
    "ImportMode",
    "ImportOrchestrator",
    "ImportOutcome",
    "ImportProgress",
    "ImportRequest",
    "ImportRequestError",
    "ItemCreated",
    "ItemDescriptor",
    "ItemFailed",
    "ItemSkipped",
    "LookupResolutionError",
    "LookupResolver",
    "RawRow",
    "assign_unique_slug",
    "base_slug",
    "decode_rows",
    "descriptors_from_references",
    "detect_dialect",
    "map_rows",
    "merge_enrichment",
    "normalize_header",
    "slugify",
    "unique_slug_among",
]
