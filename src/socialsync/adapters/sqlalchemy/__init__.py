"""SQLAlchemy adapter package for the card store."""

from __future__ import annotations

from .mappings import basecard_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyCardRepository
from .socials_codec import decode_socials, encode_socials
from .unit_of_work import (
    SqlAlchemyCardUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCardRepository",
    "SqlAlchemyCardUnitOfWork",
    "StartupError",
    "basecard_table",
    "create_all_tables",
    "decode_socials",
    "encode_socials",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
