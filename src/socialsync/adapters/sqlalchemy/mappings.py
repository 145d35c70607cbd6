"""SQLAlchemy mapping metadata for cards."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Column, DateTime, Dialect, Index, Integer, String, Table, Uuid, orm
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator, TypeEngine

from socialsync.domain.model import Card, SocialsDocument

from .socials_codec import decode_socials, encode_socials

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


class SocialsDocumentType(TypeDecorator[SocialsDocument]):
    """JSON column holding a card's socials, decoded into a tagged document."""

    impl = JSON(none_as_null=True)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[object]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB(none_as_null=True))
        return dialect.type_descriptor(JSON(none_as_null=True))

    def process_bind_param(
        self, value: SocialsDocument | None, dialect: Dialect
    ) -> dict[str, dict[str, object]] | None:
        _ = dialect
        return encode_socials(value)

    def process_result_value(self, value: object, dialect: Dialect) -> SocialsDocument:
        _ = dialect
        return decode_socials(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Only the columns the socials engine touches; the table is owned by the API service.
basecard_table = Table(
    "basecards",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("token_owner", String(42), nullable=False),
    Column("token_id", Integer, nullable=True),
    Column("nickname", String(256), nullable=True),
    Column("socials", SocialsDocumentType(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Index("ix_basecards_token_id", "token_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(Card, basecard_table)
    orm.configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
