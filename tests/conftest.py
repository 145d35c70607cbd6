from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from socialsync.adapters.sqlalchemy import create_all_tables, start_mappers
from socialsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCardUnitOfWork,
    shutdown,
    startup,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyCardUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyCardUnitOfWork:
        return SqlAlchemyCardUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture(autouse=True)
def _clean_chain_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DATABASE_URL",
        "BASECARD_CONTRACT_ADDRESS",
        "CHAIN_ID",
        "BASE_HTTP_RPC_URLS",
        "CHAIN_RPC_MAX_CALLS_PER_SECOND",
    ):
        monkeypatch.delenv(name, raising=False)
