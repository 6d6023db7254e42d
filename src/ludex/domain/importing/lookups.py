"""Find-or-create for lookup entities keyed by exact name."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ludex.domain.ports.persistence import DuplicateEntityError

if TYPE_CHECKING:
    from uuid import UUID

    from ludex.domain.model import Mechanic, Publisher
    from ludex.domain.ports.persistence import LookupRepository

log = getLogger(__name__)


class LookupResolutionError(RuntimeError):
    """Raised when a lookup entity can be neither found nor created."""


class LookupResolver[TLookup: (Publisher, Mechanic)]:
    """Resolve names to stable ids, creating entities on first reference.

    Matching is exact and case-sensitive. There is no client-side locking: if a
    concurrent writer wins the insert, the store's unique constraint rejects ours
    and the existing row is looked up again.
    """

    def __init__(self, repository: LookupRepository[TLookup], *, kind: str) -> None:
        self._repository = repository
        self._kind = kind
        self._resolved: dict[str, UUID] = {}

    def resolve(self, name: str) -> UUID:
        cached = self._resolved.get(name)
        if cached is not None:
            return cached

        existing = self._repository.find_by_name(name)
        if existing is None:
            try:
                existing = self._repository.create(name)
                log.info("Created %s %r", self._kind, name)
            except DuplicateEntityError:
                log.info("%s %r created concurrently; reusing it", self._kind.capitalize(), name)
                existing = self._repository.find_by_name(name)
        if existing is None:
            raise LookupResolutionError(f"Could not resolve {self._kind} {name!r}")

        self._resolved[name] = existing.id
        return existing.id

