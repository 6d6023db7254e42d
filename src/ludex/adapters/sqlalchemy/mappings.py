"""SQLAlchemy mapping metadata for the catalog domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from ludex.domain.model import (
    Game,
    GameAdminData,
    GameMechanic,
    ImportJob,
    ImportJobStatus,
    Library,
    Mechanic,
    Publisher,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog tables ----------------------------------------------------------------

library_table = Table(
    "library",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("owner_id", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
)

publisher_table = Table(
    "publisher",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
)

mechanic_table = Table(
    "mechanic",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
)

game_table = Table(
    "game",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "library_id", UUIDColumnType, ForeignKey("library.id", ondelete="CASCADE"), nullable=False
    ),
    Column("title", String, nullable=False),
    Column("slug", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("image_url", String, nullable=True),
    Column("bgg_id", String, nullable=True),
    Column("bgg_url", String, nullable=True),
    Column("min_players", Integer, nullable=False),
    Column("max_players", Integer, nullable=False),
    Column("suggested_age", String, nullable=True),
    Column("play_time", String, nullable=False),
    Column("difficulty", String, nullable=False),
    Column("game_type", String, nullable=False),
    Column("publisher_id", UUIDColumnType, ForeignKey("publisher.id"), nullable=True),
    Column("is_expansion", Boolean, nullable=False, default=False),
    Column("parent_game_id", UUIDColumnType, ForeignKey("game.id"), nullable=True),
    Column("is_coming_soon", Boolean, nullable=False, default=False),
    Column("is_for_sale", Boolean, nullable=False, default=False),
    Column("sale_price", Float, nullable=True),
    Column("sale_condition", String, nullable=True),
    Column("location_room", String, nullable=True),
    Column("location_shelf", String, nullable=True),
    Column("location_misc", String, nullable=True),
    Column("sleeved", Boolean, nullable=False, default=False),
    Column("upgraded_components", Boolean, nullable=False, default=False),
    Column("crowdfunded", Boolean, nullable=False, default=False),
    Column("inserts", Boolean, nullable=False, default=False),
    Column("in_base_game_box", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    UniqueConstraint("library_id", "title", name="uq_game_library_title"),
    UniqueConstraint("library_id", "slug", name="uq_game_library_slug"),
)

game_mechanic_table = Table(
    "game_mechanic",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("game_id", UUIDColumnType, ForeignKey("game.id", ondelete="CASCADE"), nullable=False),
    Column(
        "mechanic_id",
        UUIDColumnType,
        ForeignKey("mechanic.id", ondelete="CASCADE"),
        nullable=False,
    ),
    UniqueConstraint("game_id", "mechanic_id", name="uq_game_mechanic_link"),
)

game_admin_data_table = Table(
    "game_admin_data",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "game_id",
        UUIDColumnType,
        ForeignKey("game.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("purchase_date", Date, nullable=True),
    Column("purchase_price", Float, nullable=True),
)

# Job tracking ------------------------------------------------------------------

import_job_table = Table(
    "import_job",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "library_id", UUIDColumnType, ForeignKey("library.id", ondelete="CASCADE"), nullable=False
    ),
    Column("status", Enum(ImportJobStatus, native_enum=False), nullable=False),
    Column("total_items", Integer, nullable=False, default=0),
    Column("processed_items", Integer, nullable=False, default=0),
    Column("successful_items", Integer, nullable=False, default=0),
    Column("failed_items", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column(
        "updated_at",
        UTCDateTime(),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Library, library_table)
    mapper_registry.map_imperatively(Publisher, publisher_table)
    mapper_registry.map_imperatively(Mechanic, mechanic_table)
    mapper_registry.map_imperatively(Game, game_table)
    mapper_registry.map_imperatively(GameMechanic, game_mechanic_table)
    mapper_registry.map_imperatively(GameAdminData, game_admin_data_table)
    mapper_registry.map_imperatively(ImportJob, import_job_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
