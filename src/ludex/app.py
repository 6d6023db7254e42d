"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from ludex.adapters.bgg import BggEnrichmentFetcher
from ludex.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from ludex.domain.importing import ImportMode, ImportOrchestrator
from ludex.domain.model import Library
from ludex.domain.ports.unit_of_work import CatalogUnitOfWork

if TYPE_CHECKING:
    from ludex.config.importing import ImportConfig
    from ludex.domain.importing import ImportJobResult, ImportProgress, ImportRequest
    from ludex.domain.ports.enrichment import CollectionFetcher, EnrichmentFetcher

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def run_bulk_import(
    request: ImportRequest,
    *,
    enrichment: EnrichmentFetcher | None = None,
    collection: CollectionFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ImportConfig | None = None,
    progress: Callable[[ImportProgress], None] | None = None,
) -> ImportJobResult:
    """Run one bulk import against the configured adapters."""

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        _ensure_started()
        effective_uow = SqlAlchemyCatalogUnitOfWork

    needs_enrichment = request.enhance_with_bgg and enrichment is None
    needs_collection = request.mode is ImportMode.BGG_COLLECTION and collection is None
    if needs_enrichment or needs_collection:
        fetcher = BggEnrichmentFetcher()
        if needs_enrichment:
            enrichment = fetcher
        if needs_collection:
            collection = fetcher

    log.info(
        "Starting bulk import: mode=%s, library=%s, enrich=%s",
        request.mode,
        request.library_id,
        request.enhance_with_bgg,
    )
    orchestrator = ImportOrchestrator(
        unit_of_work_factory=effective_uow,
        enrichment=enrichment if request.enhance_with_bgg else None,
        collection=collection,
        config=config,
        progress=progress,
    )
    result = orchestrator.run(request)

    log.info(
        f"Finished bulk import: success={result.success}, imported={result.imported}, "
        f"failed={result.failed}, job={result.job_id}"
    )
    return result


def create_library(
    name: str,
    owner_id: str | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Library:
    """Create a target library that imports can write into."""

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        _ensure_started()
        effective_uow = SqlAlchemyCatalogUnitOfWork

    library = Library(name=name, owner_id=owner_id)
    with effective_uow() as uow:
        uow.repositories.libraries.add(library)
        uow.commit()
    log.info("Created library %r (%s)", name, library.id)
    return library
