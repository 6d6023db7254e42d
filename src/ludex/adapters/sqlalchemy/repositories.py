"""Repository implementations backed by SQLAlchemy sessions.

Every write runs inside ``Session.begin_nested()`` and is flushed at once, so a
constraint violation rolls back only that savepoint and surfaces as the
domain's :class:`DuplicateEntityError`.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ludex.adapters.sqlalchemy.mappings import (
    game_mechanic_table,
    game_table,
    mechanic_table,
    publisher_table,
)
from ludex.domain.model import (
    Game,
    GameAdminData,
    GameMechanic,
    ImportJob,
    Library,
    Mechanic,
    Publisher,
)
from ludex.domain.ports.persistence import DuplicateEntityError, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from ludex.domain.model import Entity

log = getLogger(__name__)


class _SavepointRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _write(self, entity: Entity) -> None:
        try:
            with self.session.begin_nested():
                self.session.add(entity)
                self.session.flush()
        except IntegrityError as exc:
            log.debug("Rejected %s: %s", entity.label, exc.orig)
            msg = f"{entity.entity_type} violates a uniqueness constraint"
            raise DuplicateEntityError(msg) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc


class SqlAlchemyLibraryRepository(_SavepointRepository):
    def add(self, entity: Library) -> None:
        self._write(entity)

    def get(self, library_id: UUID) -> Library | None:
        return self.session.get(Library, library_id)


class SqlAlchemyGameRepository(_SavepointRepository):
    def add(self, entity: Game) -> None:
        self._write(entity)

    def find_by_title(self, library_id: UUID, title: str) -> Game | None:
        stmt = (
            select(Game)
            .where(game_table.c.library_id == library_id)
            .where(game_table.c.title == title)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_slug(self, library_id: UUID, slug: str) -> Game | None:
        stmt = (
            select(Game)
            .where(game_table.c.library_id == library_id)
            .where(game_table.c.slug == slug)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def slugs_with_prefix(self, library_id: UUID, prefix: str) -> Sequence[str]:
        stmt = (
            select(game_table.c.slug)
            .where(game_table.c.library_id == library_id)
            .where(game_table.c.slug.startswith(prefix, autoescape=True))
            .order_by(game_table.c.slug)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyLookupRepository[TLookup: (Publisher, Mechanic)](_SavepointRepository):
    """Find-or-create storage for entities keyed by a unique ``name``."""

    def __init__(self, session: Session, entity_cls: type[TLookup], table: Table) -> None:
        super().__init__(session)
        self._entity_cls = entity_cls
        self._table = table

    def add(self, entity: TLookup) -> None:
        self._write(entity)

    def find_by_name(self, name: str) -> TLookup | None:
        stmt = select(self._entity_cls).where(self._table.c.name == name).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, name: str) -> TLookup:
        entity = self._entity_cls(name=name)
        self._write(entity)
        return entity


class SqlAlchemyPublisherRepository(SqlAlchemyLookupRepository[Publisher]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Publisher, publisher_table)


class SqlAlchemyMechanicRepository(SqlAlchemyLookupRepository[Mechanic]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Mechanic, mechanic_table)


class SqlAlchemyLinkRepository(_SavepointRepository):
    def link_mechanic(self, game_id: UUID, mechanic_id: UUID) -> None:
        stmt = (
            select(game_mechanic_table.c.id)
            .where(game_mechanic_table.c.game_id == game_id)
            .where(game_mechanic_table.c.mechanic_id == mechanic_id)
        )
        if self.session.execute(stmt).first() is not None:
            return
        self._write(GameMechanic(game_id=game_id, mechanic_id=mechanic_id))

    def add_admin_data(self, admin_data: GameAdminData) -> None:
        self._write(admin_data)


class SqlAlchemyImportJobRepository(_SavepointRepository):
    def add(self, entity: ImportJob) -> None:
        self._write(entity)

    def get(self, job_id: UUID) -> ImportJob | None:
        return self.session.get(ImportJob, job_id)
