"""Domain port definitions for adapters."""

from __future__ import annotations

from .enrichment import (
    CollectionEntry,
    CollectionFetcher,
    CollectionFetchError,
    EnrichmentFetcher,
)
from .persistence import (
    DuplicateEntityError,
    GameRepository,
    ImportJobRepository,
    LibraryRepository,
    LinkRepository,
    LookupRepository,
    PersistenceError,
    Repository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "CollectionEntry",
    "CollectionFetchError",
    "CollectionFetcher",
    "DuplicateEntityError",
    "EnrichmentFetcher",
    "GameRepository",
    "ImportJobRepository",
    "LibraryRepository",
    "LinkRepository",
    "LookupRepository",
    "PersistenceError",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
