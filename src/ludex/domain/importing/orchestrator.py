"""Application service driving a bulk import from request to job result.

Items are processed one at a time, each in its own unit of work, so a rejected
item never rolls back another. The store's unique constraints are the source of
truth for duplicates; the pre-checks here only avoid needless inserts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from ludex.config.importing import ImportConfig, get_import_config
from ludex.domain.model import (
    DEFAULT_DIFFICULTY,
    DEFAULT_GAME_TYPE,
    DEFAULT_MAX_PLAYERS,
    DEFAULT_MIN_PLAYERS,
    DEFAULT_PLAY_TIME,
    Game,
    GameAdminData,
    ImportJob,
)
from ludex.domain.ports.enrichment import CollectionFetchError
from ludex.domain.ports.persistence import DuplicateEntityError, PersistenceError

from .coercion import is_blank
from .descriptor import ItemDescriptor
from .dialects import BGG_BOARDGAME_URL, descriptors_from_references, map_rows
from .lookups import LookupResolver
from .merge import merge_enrichment
from .outcomes import (
    FailureCategory,
    ImportJobResult,
    ItemCreated,
    ItemFailed,
    ItemSkipped,
)
from .request import ImportMode, ImportProgress
from .slugs import base_slug, unique_slug_among
from .tabular import decode_rows

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from ludex.domain.ports.enrichment import CollectionFetcher, EnrichmentFetcher
    from ludex.domain.ports.unit_of_work import CatalogUnitOfWork

    from .outcomes import ImportOutcome
    from .request import ImportDefaults, ImportRequest

    type ProgressCallback = Callable[[ImportProgress], None]

log = getLogger(__name__)


class ImportRequestError(ValueError):
    """Raised when a request cannot be turned into a batch of items."""


@dataclass(slots=True)
class _Tally:
    total: int
    imported: int = 0
    failed: int = 0
    outcomes: list[ImportOutcome] = field(default_factory=list["ImportOutcome"])

    @property
    def processed(self) -> int:
        return self.imported + self.failed

    def record(self, outcome: ImportOutcome) -> None:
        self.outcomes.append(outcome)
        if isinstance(outcome, ItemCreated):
            self.imported += 1
        else:
            self.failed += 1


class ImportOrchestrator:
    """Run one import job: collect items, enrich, persist and report.

    ``run`` never raises. Item problems end up in the result's failures and
    whole-job problems in :meth:`ImportJobResult.job_failure`.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork],
        enrichment: EnrichmentFetcher | None = None,
        collection: CollectionFetcher | None = None,
        config: ImportConfig | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._enrichment = enrichment
        self._collection = collection
        self._config = config or get_import_config()
        self._progress = progress

    def run(self, request: ImportRequest) -> ImportJobResult:
        try:
            self._require_library(request.library_id)
            descriptors = self._collect(request)
            job_id = self._start_job(request.library_id, len(descriptors))
        except (ImportRequestError, CollectionFetchError) as exc:
            log.warning("Import rejected: %s", exc)
            return ImportJobResult.job_failure(str(exc))
        except Exception:
            log.exception("Failed to prepare import for library %s", request.library_id)
            return ImportJobResult.job_failure("Failed to process import")

        log.info(
            "Importing %d item(s) into library %s (mode=%s, enrich=%s)",
            len(descriptors),
            request.library_id,
            request.mode,
            request.enhance_with_bgg,
        )
        tally = _Tally(total=len(descriptors))
        self._emit("start", tally, index=0)

        for index, descriptor in enumerate(descriptors, start=1):
            outcome = self._process_item(request, descriptor, tally, index)
            tally.record(outcome)
            phase = "imported" if isinstance(outcome, ItemCreated) else "error"
            self._emit(phase, tally, index=index, item=descriptor.label)
            self._update_job(job_id, tally)

        self._finish_job(job_id, tally)
        self._emit("done", tally, index=tally.total)
        log.info(
            "Import finished: %d imported, %d failed of %d",
            tally.imported,
            tally.failed,
            tally.total,
        )
        return ImportJobResult.from_outcomes(
            tally.outcomes,
            max_reported_errors=self._config.max_reported_errors,
            job_id=job_id,
        )

    # ------------------------------------------------------------------ collection

    def _require_library(self, library_id: UUID) -> None:
        with self._unit_of_work_factory() as uow:
            if uow.repositories.libraries.get(library_id) is None:
                raise ImportRequestError(f"Library {library_id} not found")

    def _collect(self, request: ImportRequest) -> list[ItemDescriptor]:
        match request.mode:
            case ImportMode.CSV if request.csv_data:
                return map_rows(decode_rows(request.csv_data))
            case ImportMode.BGG_LINKS if request.references:
                return descriptors_from_references(request.references)
            case ImportMode.BGG_COLLECTION if request.bgg_username:
                if self._collection is None:
                    raise ImportRequestError("Collection import is not available")
                entries = self._collection.fetch_collection(request.bgg_username)
                log.info(
                    "Collection of %s holds %d owned item(s)", request.bgg_username, len(entries)
                )
                return [
                    ItemDescriptor(
                        title=entry.title,
                        external_id=entry.external_id,
                        external_url=BGG_BOARDGAME_URL.format(id=entry.external_id),
                    )
                    for entry in entries
                ]
            case _:
                raise ImportRequestError("Invalid import mode or missing data")

    # ------------------------------------------------------------------ per item

    def _process_item(
        self,
        request: ImportRequest,
        descriptor: ItemDescriptor,
        tally: _Tally,
        index: int,
    ) -> ImportOutcome:
        label = descriptor.label
        try:
            enrichment = self._enrichment if request.enhance_with_bgg else None
            if enrichment is not None and self._needs_enrichment(descriptor):
                self._emit("enhancing", tally, index=index, item=label)
                self._enrich(enrichment, descriptor)

            if is_blank(descriptor.title):
                log.warning("No title for item %s; skipping", label)
                return ItemFailed(
                    label=label,
                    reason=f"Could not determine title for BGG ID: {descriptor.external_id}",
                    category=FailureCategory.MISSING_TITLE,
                )

            self._emit("importing", tally, index=index, item=descriptor.title)
            with self._unit_of_work_factory() as uow:
                return self._persist(uow, request, descriptor)
        except Exception as exc:
            log.exception("Error importing %r", label)
            return ItemFailed(
                label=label,
                reason=f'Error importing "{label}": {exc}',
                category=FailureCategory.EXCEPTION,
            )

    def _needs_enrichment(self, descriptor: ItemDescriptor) -> bool:
        return len(descriptor.source_description) <= self._config.substantial_description_length

    def _enrich(self, enrichment: EnrichmentFetcher, descriptor: ItemDescriptor) -> None:
        if descriptor.external_id is None and descriptor.title:
            descriptor.external_id = self._search_id(enrichment, descriptor.title)
            if descriptor.external_id is not None and descriptor.external_url is None:
                descriptor.external_url = BGG_BOARDGAME_URL.format(id=descriptor.external_id)
        if descriptor.external_id is None:
            return

        try:
            result = enrichment.fetch(descriptor.external_id)
        except Exception as exc:  # noqa: BLE001
            log.warning("Enrichment failed for %s: %s", descriptor.external_id, exc)
            return
        if result.is_stub:
            log.info("No BGG data for %s; keeping local fields", descriptor.external_id)
        merge_enrichment(descriptor, result)

    def _search_id(self, enrichment: EnrichmentFetcher, title: str) -> str | None:
        try:
            found = enrichment.search_by_title(title)
        except Exception as exc:  # noqa: BLE001
            log.warning("Title lookup failed for %r: %s", title, exc)
            return None
        if found is not None:
            log.info("Found BGG id %s for %r", found, title)
        return found

    def _persist(
        self,
        uow: CatalogUnitOfWork,
        request: ImportRequest,
        descriptor: ItemDescriptor,
    ) -> ImportOutcome:
        repositories = uow.repositories
        games = repositories.games
        library_id = request.library_id
        title = descriptor.title

        if games.find_by_title(library_id, title) is not None:
            log.info("Skipping %r: already in library", title)
            return ItemSkipped(title=title)

        def slug_taken(candidate: str) -> bool:
            return games.find_by_slug(library_id, candidate) is not None

        def free_slug() -> str:
            taken = games.slugs_with_prefix(library_id, base_slug(title))
            return unique_slug_among(title, set(taken))

        publisher_id = None
        publisher = descriptor.publisher
        if publisher is not None and not is_blank(publisher):
            publisher_id = LookupResolver(repositories.publishers, kind="publisher").resolve(
                publisher
            )
        mechanic_resolver = LookupResolver(repositories.mechanics, kind="mechanic")
        mechanic_ids = [mechanic_resolver.resolve(name) for name in descriptor.mechanics]

        game = _build_game(
            descriptor,
            library_id=library_id,
            slug=free_slug(),
            publisher_id=publisher_id,
            parent_game_id=self._resolve_parent(uow, library_id, descriptor),
            defaults=request.defaults,
        )

        for attempt in range(1, self._config.slug_conflict_retries + 1):
            try:
                games.add(game)
                break
            except DuplicateEntityError as exc:
                if games.find_by_title(library_id, title) is not None:
                    log.info("Skipping %r: created concurrently", title)
                    return ItemSkipped(title=title)
                if not slug_taken(game.slug):
                    return _create_failed(title, exc)
                log.info(
                    "Slug %r taken on insert (attempt %d); trying the next free slug",
                    game.slug,
                    attempt,
                )
                game.slug = free_slug()
            except PersistenceError as exc:
                return _create_failed(title, exc)
        else:
            return _create_failed(title, "slug conflict could not be resolved")

        self._write_links(uow, game, mechanic_ids, descriptor)
        uow.commit()
        log.info("Imported %r as %s", title, game.slug)
        return ItemCreated(id=game.id, title=title)

    def _resolve_parent(
        self,
        uow: CatalogUnitOfWork,
        library_id: UUID,
        descriptor: ItemDescriptor,
    ) -> UUID | None:
        parent_title = descriptor.parent_title
        if not descriptor.is_expansion or parent_title is None or is_blank(parent_title):
            return None
        parent = uow.repositories.games.find_by_title(library_id, parent_title)
        if parent is None:
            log.info(
                "Parent %r of %r not found; leaving unset",
                parent_title,
                descriptor.title,
            )
            return None
        return parent.id

    def _write_links(
        self,
        uow: CatalogUnitOfWork,
        game: Game,
        mechanic_ids: list[UUID],
        descriptor: ItemDescriptor,
    ) -> None:
        links = uow.repositories.links
        for mechanic_id in mechanic_ids:
            try:
                links.link_mechanic(game.id, mechanic_id)
            except PersistenceError as exc:
                log.warning("Could not link mechanic %s to %r: %s", mechanic_id, game.title, exc)

        admin_data = _build_admin_data(game, descriptor)
        if admin_data is None:
            return
        try:
            links.add_admin_data(admin_data)
        except PersistenceError as exc:
            log.warning("Could not store purchase data for %r: %s", game.title, exc)

    # ------------------------------------------------------------------ job tracking

    def _start_job(self, library_id: UUID, total: int) -> UUID:
        job = ImportJob(library_id=library_id, total_items=total)
        with self._unit_of_work_factory() as uow:
            uow.repositories.import_jobs.add(job)
            uow.commit()
        return job.id

    def _update_job(self, job_id: UUID, tally: _Tally) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                job = uow.repositories.import_jobs.get(job_id)
                if job is None:
                    return
                job.record_progress(
                    processed=tally.processed,
                    successful=tally.imported,
                    failed=tally.failed,
                )
                uow.commit()
        except PersistenceError as exc:
            log.warning("Could not update import job %s: %s", job_id, exc)

    def _finish_job(self, job_id: UUID, tally: _Tally) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                job = uow.repositories.import_jobs.get(job_id)
                if job is None:
                    return
                if tally.total and not tally.imported:
                    job.fail()
                else:
                    job.finish()
                uow.commit()
        except PersistenceError as exc:
            log.warning("Could not close import job %s: %s", job_id, exc)

    def _emit(self, phase: str, tally: _Tally, *, index: int, item: str | None = None) -> None:
        if self._progress is None:
            return
        self._progress(
            ImportProgress(
                phase=phase,
                current=index,
                total=tally.total,
                imported=tally.imported,
                failed=tally.failed,
                current_item=item,
            )
        )


def _create_failed(title: str, error: object) -> ItemFailed:
    log.warning("Failed to create %r: %s", title, error)
    return ItemFailed(
        label=title,
        reason=f'Failed to create "{title}": {error}',
        category=FailureCategory.CREATE_FAILED,
    )


def _first_present[T](*values: T | None, fallback: T) -> T:
    for value in values:
        if value is not None and not is_blank(value):
            return value
    return fallback


def _build_game(
    descriptor: ItemDescriptor,
    *,
    library_id: UUID,
    slug: str,
    publisher_id: UUID | None,
    parent_game_id: UUID | None,
    defaults: ImportDefaults,
) -> Game:
    return Game(
        library_id=library_id,
        title=descriptor.title,
        slug=slug,
        description=descriptor.description or None,
        image_url=descriptor.image_url or None,
        bgg_id=descriptor.external_id or None,
        bgg_url=descriptor.external_url or None,
        min_players=_first_present(descriptor.min_players, fallback=DEFAULT_MIN_PLAYERS),
        max_players=_first_present(descriptor.max_players, fallback=DEFAULT_MAX_PLAYERS),
        suggested_age=descriptor.suggested_age or None,
        play_time=_first_present(descriptor.play_time, fallback=str(DEFAULT_PLAY_TIME)),
        difficulty=_first_present(descriptor.difficulty, fallback=str(DEFAULT_DIFFICULTY)),
        game_type=_first_present(descriptor.game_type, fallback=str(DEFAULT_GAME_TYPE)),
        publisher_id=publisher_id,
        is_expansion=descriptor.is_expansion,
        parent_game_id=parent_game_id,
        is_coming_soon=_first_present(
            descriptor.is_coming_soon, defaults.is_coming_soon, fallback=False
        ),
        is_for_sale=_first_present(descriptor.is_for_sale, defaults.is_for_sale, fallback=False),
        sale_price=_first_present(descriptor.sale_price, defaults.sale_price, fallback=None),
        sale_condition=_first_present(
            descriptor.sale_condition, defaults.sale_condition, fallback=None
        ),
        location_room=_first_present(
            descriptor.location_room, defaults.location_room, fallback=None
        ),
        location_shelf=_first_present(
            descriptor.location_shelf, defaults.location_shelf, fallback=None
        ),
        location_misc=_first_present(
            descriptor.location_misc, defaults.location_misc, fallback=None
        ),
        sleeved=_first_present(descriptor.sleeved, defaults.sleeved, fallback=False),
        upgraded_components=_first_present(
            descriptor.upgraded_components, defaults.upgraded_components, fallback=False
        ),
        crowdfunded=_first_present(descriptor.crowdfunded, defaults.crowdfunded, fallback=False),
        inserts=_first_present(descriptor.inserts, defaults.inserts, fallback=False),
        in_base_game_box=descriptor.in_base_game_box,
    )


def _build_admin_data(game: Game, descriptor: ItemDescriptor) -> GameAdminData | None:
    purchase_date = None
    if descriptor.purchase_date:
        try:
            purchase_date = date.fromisoformat(descriptor.purchase_date)
        except ValueError:
            log.info("Ignoring unparseable purchase date %r", descriptor.purchase_date)
    if purchase_date is None and descriptor.purchase_price is None:
        return None
    return GameAdminData(
        game_id=game.id,
        purchase_date=purchase_date,
        purchase_price=descriptor.purchase_price,
    )
