"""Ports for external metadata enrichment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ludex.domain.importing.descriptor import EnrichmentResult


@runtime_checkable
class EnrichmentFetcher(Protocol):
    """Fetch supplementary metadata for one external reference id.

    Implementations never raise for ordinary failures; they return a stub result
    carrying only the id instead.
    """

    def fetch(self, external_id: str) -> EnrichmentResult: ...

    def search_by_title(self, title: str) -> str | None: ...


@dataclass(slots=True, frozen=True)
class CollectionEntry:
    """One owned item of a remote user collection."""

    external_id: str
    title: str


@runtime_checkable
class CollectionFetcher(Protocol):
    """Fetch the owned collection of a remote user; raises on failure."""

    def fetch_collection(self, username: str) -> list[CollectionEntry]: ...


class CollectionFetchError(RuntimeError):
    """Raised when a remote collection cannot be retrieved."""
