"""Public interface for the BoardGameGeek adapter."""

from __future__ import annotations

from .client import BggClient, BggResponse
from .fetcher import BackoffPolicy, BggEnrichmentFetcher, ResponseKind, RetryState
from .schema import BggCollectionItem, BggSearchHit, BggThingPayload
from .translator import parse_thing, translate_thing

__all__ = [
    "BackoffPolicy",
    "BggClient",
    "BggCollectionItem",
    "BggEnrichmentFetcher",
    "BggResponse",
    "BggSearchHit",
    "BggThingPayload",
    "ResponseKind",
    "RetryState",
    "parse_thing",
    "translate_thing",
]
