from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from socialsync.adapters.sqlalchemy import create_all_tables, start_mappers
from socialsync.adapters.sqlalchemy.unit_of_work import is_started, shutdown
from socialsync.app import migrate_legacy_socials, sync_socials, verify_onchain_socials
from socialsync.config import AppConfig, ConfigurationError, DatabaseConfig
from socialsync.domain.gate import RunMode
from tests.helpers.cards import (
    FakeCardRepository,
    FakeCardUnitOfWork,
    FakeReader,
    legacy,
    make_card,
    structured,
    uow_factory,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from socialsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCardUnitOfWork


def test_migrate_with_injected_unit_of_work_needs_no_environment() -> None:
    card = make_card(1, socials=legacy(github="octocat"))
    uow = FakeCardUnitOfWork(FakeCardRepository([card]))

    result = migrate_legacy_socials(mode=RunMode.EXECUTE, unit_of_work_factory=uow_factory(uow))

    assert result.migrated == 1
    assert card.socials == structured(github="octocat")


def test_sync_with_injected_adapters() -> None:
    card = make_card(1, socials=structured(x="bob"))
    uow = FakeCardUnitOfWork(FakeCardRepository([card]))

    result = sync_socials(
        mode=RunMode.DRY_RUN,
        reader=FakeReader({(1, "twitter"): "Bobby"}),
        unit_of_work_factory=uow_factory(uow),
    )

    assert result.changed == 1
    assert result.updated == 0


def test_verify_without_chain_configuration_fails() -> None:
    uow = FakeCardUnitOfWork(FakeCardRepository())
    config = AppConfig(database=DatabaseConfig(uri="sqlite+pysqlite:///:memory:"))

    with pytest.raises(ConfigurationError):
        verify_onchain_socials(config=config, unit_of_work_factory=uow_factory(uow))


def test_migrate_starts_store_from_config(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCardUnitOfWork],
) -> None:
    card = make_card(1, socials=legacy(x="jack"))
    with sqlite_unit_of_work() as uow:
        uow.repositories.cards.add(card)
        uow.commit()

    # the fixture already started the adapter, so the config is not used to connect
    config = AppConfig(database=DatabaseConfig(uri="sqlite+pysqlite:///:memory:"))
    result = migrate_legacy_socials(config=config)

    assert result.candidates == 1
    assert len(result.changes) == 1


def test_migrate_connects_with_configured_uri(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    database_uri = f"sqlite+pysqlite:///{tmp_path / 'cards.db'}"
    engine = create_engine(database_uri)
    start_mappers()
    create_all_tables(engine)
    engine.dispose()
    monkeypatch.setenv("DATABASE_URL", database_uri)
    shutdown()

    try:
        result = migrate_legacy_socials()
        assert is_started()
    finally:
        shutdown()

    assert result.candidates == 0
