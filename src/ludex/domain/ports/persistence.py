"""Ports for persisting catalog aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ludex.domain.model import (
    Game,
    GameAdminData,
    ImportJob,
    Library,
    Mechanic,
    Publisher,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class PersistenceError(RuntimeError):
    """Raised by repositories when the store rejects a write."""


class DuplicateEntityError(PersistenceError):
    """Raised when the store rejects an insert because of a uniqueness constraint."""


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class LibraryRepository(Repository[Library], Protocol):
    def get(self, library_id: UUID) -> Library | None: ...


@runtime_checkable
class GameRepository(Repository[Game], Protocol):
    """Persistence contract for games.

    ``add`` flushes immediately and raises :class:`DuplicateEntityError` when the
    title or slug already exists in the library. Every write runs in its own
    savepoint, so a rejected write leaves the surrounding transaction usable.
    """

    def find_by_title(self, library_id: UUID, title: str) -> Game | None: ...

    def find_by_slug(self, library_id: UUID, slug: str) -> Game | None: ...

    def slugs_with_prefix(self, library_id: UUID, prefix: str) -> Sequence[str]: ...


@runtime_checkable
class LookupRepository[TLookup: (Publisher, Mechanic)](Protocol):
    """Find-or-create contract for lookup entities keyed by exact name."""

    def find_by_name(self, name: str) -> TLookup | None: ...

    def create(self, name: str) -> TLookup: ...


@runtime_checkable
class LinkRepository(Protocol):
    """Auxiliary linkage rows written after a game exists."""

    def link_mechanic(self, game_id: UUID, mechanic_id: UUID) -> None: ...

    def add_admin_data(self, admin_data: GameAdminData) -> None: ...


@runtime_checkable
class ImportJobRepository(Repository[ImportJob], Protocol):
    def get(self, job_id: UUID) -> ImportJob | None: ...
