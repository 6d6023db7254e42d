from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import select

from ludex.adapters.sqlalchemy.mappings import game_mechanic_table
from ludex.config.importing import ImportConfig
from ludex.domain.importing import (
    EnrichmentResult,
    FailureCategory,
    ImportDefaults,
    ImportMode,
    ImportOrchestrator,
    ImportProgress,
    ImportRequest,
    ItemFailed,
    ItemSkipped,
)
from ludex.domain.model import (
    DEFAULT_DIFFICULTY,
    DEFAULT_MAX_PLAYERS,
    DEFAULT_MIN_PLAYERS,
    DEFAULT_PLAY_TIME,
    Difficulty,
    GameAdminData,
    GameMechanic,
    ImportJobStatus,
    PlayTime,
)
from ludex.domain.ports.enrichment import CollectionEntry, CollectionFetchError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ludex.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork
    from ludex.domain.model import Game, Library

    type UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


CATAN = EnrichmentResult(
    external_id="13",
    title="CATAN",
    description="Trade, build and settle the island of Catan.",
    image_url="https://cf.geekdo-images.com/catan.jpg",
    min_players=3,
    max_players=4,
    suggested_age="10+",
    play_time=PlayTime.OVER_60,
    difficulty=Difficulty.MEDIUM_LIGHT,
    mechanics=("Dice Rolling", "Trading"),
    publisher="KOSMOS",
)


class FakeEnrichmentFetcher:
    def __init__(
        self,
        results: dict[str, EnrichmentResult] | None = None,
        search_hits: dict[str, str] | None = None,
    ) -> None:
        self.results = results or {}
        self.search_hits = search_hits or {}
        self.fetched: list[str] = []
        self.searched: list[str] = []

    def fetch(self, external_id: str) -> EnrichmentResult:
        self.fetched.append(external_id)
        return self.results.get(external_id, EnrichmentResult.stub(external_id))

    def search_by_title(self, title: str) -> str | None:
        self.searched.append(title)
        return self.search_hits.get(title)


class ExplodingEnrichmentFetcher(FakeEnrichmentFetcher):
    def fetch(self, external_id: str) -> EnrichmentResult:
        raise RuntimeError("connection reset")


class FakeCollectionFetcher:
    def __init__(
        self,
        entries: list[CollectionEntry] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.entries = entries or []
        self.error = error
        self.usernames: list[str] = []

    def fetch_collection(self, username: str) -> list[CollectionEntry]:
        self.usernames.append(username)
        if self.error is not None:
            raise self.error
        return list(self.entries)


def _orchestrator(
    uow_factory: UowFactory,
    *,
    enrichment: FakeEnrichmentFetcher | None = None,
    collection: FakeCollectionFetcher | None = None,
    config: ImportConfig | None = None,
    progress: Callable[[ImportProgress], None] | None = None,
) -> ImportOrchestrator:
    return ImportOrchestrator(
        unit_of_work_factory=uow_factory,
        enrichment=enrichment,
        collection=collection,
        config=config or ImportConfig(),
        progress=progress,
    )


def _csv_request(library: Library, csv_data: str, **kwargs: object) -> ImportRequest:
    return ImportRequest(
        mode=ImportMode.CSV,
        library_id=library.id,
        csv_data=csv_data,
        **kwargs,  # type: ignore[arg-type]
    )


def _game(uow_factory: UowFactory, library: Library, title: str) -> Game | None:
    with uow_factory() as uow:
        return uow.repositories.games.find_by_title(library.id, title)


def test_duplicate_title_in_one_batch_is_skipped(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    csv_data = 'Title,BGG ID,Play Time,Notes\n"Catan","13","90","Great game"\nCatan,13,90,\n'

    result = _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, csv_data, enhance_with_bgg=False)
    )

    assert result.success is True
    assert result.imported == 1
    assert result.failed == 1
    assert result.errors == ['"Catan" already exists']
    assert isinstance(result.failures[0], ItemSkipped)
    assert result.failures[0].category is FailureCategory.ALREADY_EXISTS

    game = _game(sqlite_unit_of_work, library, "Catan")
    assert game is not None
    assert game.slug == "catan"
    assert game.bgg_id == "13"
    assert game.bgg_url == "https://boardgamegeek.com/boardgame/13"
    assert game.play_time == PlayTime.OVER_60
    assert game.description is not None
    assert "Great game" in game.description


def test_same_title_in_later_batch_is_skipped(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    orchestrator = _orchestrator(sqlite_unit_of_work)
    request = _csv_request(library, "title\nAzul\n", enhance_with_bgg=False)

    first = orchestrator.run(request)
    second = orchestrator.run(request)

    assert first.imported == 1
    assert second.success is False
    assert second.imported == 0
    assert second.errors == ['"Azul" already exists']


def test_colliding_slugs_get_numeric_suffixes(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    result = _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, "title\nCatan!\nCatan?\nCATAN\n", enhance_with_bgg=False)
    )

    assert result.imported == 3
    slugs = [
        game.slug
        for title in ("Catan!", "Catan?", "CATAN")
        if (game := _game(sqlite_unit_of_work, library, title)) is not None
    ]
    assert slugs == ["catan", "catan-1", "catan-2"]


def test_missing_defaults_are_filled(sqlite_unit_of_work: UowFactory, library: Library) -> None:
    _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, "title\nHanabi\n", enhance_with_bgg=False)
    )

    game = _game(sqlite_unit_of_work, library, "Hanabi")
    assert game is not None
    assert game.min_players == DEFAULT_MIN_PLAYERS
    assert game.max_players == DEFAULT_MAX_PLAYERS
    assert game.play_time == DEFAULT_PLAY_TIME
    assert game.difficulty == DEFAULT_DIFFICULTY
    assert game.sleeved is False
    assert game.publisher_id is None


def test_request_defaults_apply_only_where_rows_are_silent(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    defaults = ImportDefaults(location_room="Den", sleeved=True, is_coming_soon=True)
    csv_data = "title,sleeved,location_room\nAzul,no,\nBrass,,Attic\n"

    _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, csv_data, enhance_with_bgg=False, defaults=defaults)
    )

    azul = _game(sqlite_unit_of_work, library, "Azul")
    brass = _game(sqlite_unit_of_work, library, "Brass")
    assert azul is not None
    assert brass is not None
    assert azul.sleeved is False
    assert azul.location_room == "Den"
    assert brass.sleeved is True
    assert brass.location_room == "Attic"
    assert azul.is_coming_soon is True


def test_publisher_mechanics_and_purchase_data_are_stored(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    csv_data = (
        "title,publisher,mechanics,purchase_price,purchase_date\n"
        "Azul,Plan B,Tile Placement;Pattern Building,39.99,2023-05-01\n"
        "Azul: Summer Pavilion,Plan B,Tile Placement,,\n"
    )

    result = _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, csv_data, enhance_with_bgg=False)
    )

    assert result.imported == 2
    with sqlite_unit_of_work() as uow:
        repositories = uow.repositories
        azul = repositories.games.find_by_title(library.id, "Azul")
        pavilion = repositories.games.find_by_title(library.id, "Azul: Summer Pavilion")
        publisher = repositories.publishers.find_by_name("Plan B")
        tile_placement = repositories.mechanics.find_by_name("Tile Placement")
        assert azul is not None
        assert pavilion is not None
        assert publisher is not None
        assert tile_placement is not None
        assert azul.publisher_id == pavilion.publisher_id == publisher.id

        links = (
            uow.session.execute(
                select(GameMechanic).where(game_mechanic_table.c.game_id == azul.id)
            )
            .scalars()
            .all()
        )
        assert len(links) == 2
        assert tile_placement.id in {link.mechanic_id for link in links}

        admin_rows = uow.session.execute(select(GameAdminData)).scalars().all()
        assert len(admin_rows) == 1
        admin = admin_rows[0]
        assert admin.game_id == azul.id
        assert admin.purchase_price == 39.99
        assert str(admin.purchase_date) == "2023-05-01"


def test_expansion_is_linked_to_parent_in_library(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    csv_data = (
        "title,is_expansion,parent_game\n"
        "Brass,,\n"
        "Brass: Extra Tiles,yes,Brass\n"
        "Orphan Expansion,yes,Unknown Base\n"
    )

    _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, csv_data, enhance_with_bgg=False)
    )

    base = _game(sqlite_unit_of_work, library, "Brass")
    expansion = _game(sqlite_unit_of_work, library, "Brass: Extra Tiles")
    orphan = _game(sqlite_unit_of_work, library, "Orphan Expansion")
    assert base is not None
    assert expansion is not None
    assert orphan is not None
    assert expansion.is_expansion is True
    assert expansion.parent_game_id == base.id
    assert orphan.parent_game_id is None


def test_links_are_enriched_from_reference_ids(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    fetcher = FakeEnrichmentFetcher(results={"13": CATAN})
    request = ImportRequest(
        mode=ImportMode.BGG_LINKS,
        library_id=library.id,
        references=("https://boardgamegeek.com/boardgame/13/catan", "999"),
    )

    result = _orchestrator(sqlite_unit_of_work, enrichment=fetcher).run(request)

    assert fetcher.fetched == ["13", "999"]
    assert result.imported == 1
    assert result.failed == 1
    failure = result.failures[0]
    assert isinstance(failure, ItemFailed)
    assert failure.category is FailureCategory.MISSING_TITLE
    assert failure.reason == "Could not determine title for BGG ID: 999"

    game = _game(sqlite_unit_of_work, library, "CATAN")
    assert game is not None
    assert game.bgg_url == "https://boardgamegeek.com/boardgame/13/catan"
    assert game.min_players == 3
    assert game.suggested_age == "10+"
    assert game.difficulty == Difficulty.MEDIUM_LIGHT
    assert game.description == "Trade, build and settle the island of Catan."
    with sqlite_unit_of_work() as uow:
        publisher = uow.repositories.publishers.find_by_name("KOSMOS")
        assert publisher is not None
        assert game.publisher_id == publisher.id


def test_title_search_supplies_missing_reference_id(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    fetcher = FakeEnrichmentFetcher(results={"13": CATAN}, search_hits={"Catan": "13"})

    _orchestrator(sqlite_unit_of_work, enrichment=fetcher).run(
        _csv_request(library, "title,min_players\nCatan,2\n")
    )

    assert fetcher.searched == ["Catan"]
    game = _game(sqlite_unit_of_work, library, "Catan")
    assert game is not None
    assert game.bgg_id == "13"
    assert game.bgg_url == "https://boardgamegeek.com/boardgame/13"
    assert game.min_players == 2
    assert game.max_players == 4


def test_substantial_local_description_skips_enrichment(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    fetcher = FakeEnrichmentFetcher(results={"13": CATAN})
    narrative = "Our copy of the classic trading game, with every expansion inside."
    csv_data = f'title,bgg_id,description\nCatan,13,"{narrative}"\nAzul,230802,Short\n'

    _orchestrator(sqlite_unit_of_work, enrichment=fetcher).run(_csv_request(library, csv_data))

    assert fetcher.fetched == ["230802"]
    game = _game(sqlite_unit_of_work, library, "Catan")
    assert game is not None
    assert game.description == narrative
    assert game.image_url is None


def test_enrichment_errors_do_not_fail_the_item(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    fetcher = ExplodingEnrichmentFetcher()

    result = _orchestrator(sqlite_unit_of_work, enrichment=fetcher).run(
        _csv_request(library, "title,bgg_id\nCatan,13\n")
    )

    assert result.imported == 1
    assert result.failed == 0


def test_enhance_flag_off_never_calls_fetcher(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    fetcher = FakeEnrichmentFetcher(results={"13": CATAN})

    _orchestrator(sqlite_unit_of_work, enrichment=fetcher).run(
        _csv_request(library, "title,bgg_id\nCatan,13\n", enhance_with_bgg=False)
    )

    assert fetcher.fetched == []
    assert fetcher.searched == []


def test_unknown_library_is_a_job_failure(sqlite_unit_of_work: UowFactory) -> None:
    library_id = uuid4()
    request = ImportRequest(mode=ImportMode.CSV, library_id=library_id, csv_data="title\nAzul\n")

    result = _orchestrator(sqlite_unit_of_work).run(request)

    assert result.success is False
    assert result.error == f"Library {library_id} not found"
    assert result.job_id is None
    assert result.to_dict()["error"] == result.error


def test_missing_payload_is_a_job_failure(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    request = ImportRequest(mode=ImportMode.BGG_LINKS, library_id=library.id)

    result = _orchestrator(sqlite_unit_of_work).run(request)

    assert result.success is False
    assert result.error == "Invalid import mode or missing data"


def test_empty_batch_completes_without_items(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    result = _orchestrator(sqlite_unit_of_work).run(
        _csv_request(library, "title,publisher\n", enhance_with_bgg=False)
    )

    assert result.success is False
    assert result.error is None
    assert result.imported == result.failed == 0
    assert result.job_id is not None
    with sqlite_unit_of_work() as uow:
        job = uow.repositories.import_jobs.get(result.job_id)
        assert job is not None
        assert job.status is ImportJobStatus.COMPLETED


def test_error_list_is_capped_but_counts_are_not(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    result = _orchestrator(sqlite_unit_of_work, config=ImportConfig(max_reported_errors=2)).run(
        _csv_request(library, "title\nAzul\nAzul\nAzul\nAzul\n", enhance_with_bgg=False)
    )

    assert result.imported == 1
    assert result.failed == 3
    assert len(result.errors) == 2
    assert len(result.failures) == 2


def test_progress_and_job_tracking(sqlite_unit_of_work: UowFactory, library: Library) -> None:
    events: list[ImportProgress] = []
    fetcher = FakeEnrichmentFetcher(results={"13": CATAN})

    result = _orchestrator(sqlite_unit_of_work, enrichment=fetcher, progress=events.append).run(
        _csv_request(library, "title,bgg_id\nCatan,13\nCatan,13\n")
    )

    assert [event.phase for event in events] == [
        "start",
        "enhancing",
        "importing",
        "imported",
        "enhancing",
        "importing",
        "error",
        "done",
    ]
    assert events[-1].imported == 1
    assert events[-1].failed == 1
    assert events[-1].total == 2
    assert events[3].current_item == "Catan"

    assert result.job_id is not None
    with sqlite_unit_of_work() as uow:
        job = uow.repositories.import_jobs.get(result.job_id)
        assert job is not None
        assert job.status is ImportJobStatus.COMPLETED
        assert job.total_items == 2
        assert job.processed_items == 2
        assert job.successful_items == 1
        assert job.failed_items == 1


def test_job_fails_when_nothing_was_imported(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    orchestrator = _orchestrator(sqlite_unit_of_work)
    request = _csv_request(library, "title\nAzul\n", enhance_with_bgg=False)
    orchestrator.run(request)

    result = orchestrator.run(request)

    assert result.job_id is not None
    with sqlite_unit_of_work() as uow:
        job = uow.repositories.import_jobs.get(result.job_id)
        assert job is not None
        assert job.status is ImportJobStatus.FAILED


def test_collection_entries_are_imported(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    collection = FakeCollectionFetcher(
        entries=[
            CollectionEntry(external_id="13", title="CATAN"),
            CollectionEntry(external_id="230802", title="Azul"),
        ]
    )
    request = ImportRequest(
        mode=ImportMode.BGG_COLLECTION,
        library_id=library.id,
        bgg_username="meeple",
        enhance_with_bgg=False,
    )

    result = _orchestrator(sqlite_unit_of_work, collection=collection).run(request)

    assert collection.usernames == ["meeple"]
    assert result.imported == 2
    azul = _game(sqlite_unit_of_work, library, "Azul")
    assert azul is not None
    assert azul.bgg_url == "https://boardgamegeek.com/boardgame/230802"


def test_collection_fetch_error_is_a_job_failure(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    collection = FakeCollectionFetcher(error=CollectionFetchError("BGG user not found"))
    request = ImportRequest(
        mode=ImportMode.BGG_COLLECTION, library_id=library.id, bgg_username="nobody"
    )

    result = _orchestrator(sqlite_unit_of_work, collection=collection).run(request)

    assert result.success is False
    assert result.error == "BGG user not found"


def test_collection_mode_without_fetcher_is_rejected(
    sqlite_unit_of_work: UowFactory, library: Library
) -> None:
    request = ImportRequest(
        mode=ImportMode.BGG_COLLECTION, library_id=library.id, bgg_username="meeple"
    )

    result = _orchestrator(sqlite_unit_of_work).run(request)

    assert result.error == "Collection import is not available"
