"""SQLAlchemy adapter package for ludex."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyGameRepository,
    SqlAlchemyImportJobRepository,
    SqlAlchemyLibraryRepository,
    SqlAlchemyLinkRepository,
    SqlAlchemyMechanicRepository,
    SqlAlchemyPublisherRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyGameRepository",
    "SqlAlchemyImportJobRepository",
    "SqlAlchemyLibraryRepository",
    "SqlAlchemyLinkRepository",
    "SqlAlchemyMechanicRepository",
    "SqlAlchemyPublisherRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
