from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import text

from socialsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCardUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from socialsync.domain.errors import PersistenceError
from socialsync.domain.gate import RunMode
from socialsync.domain.migration import migrate_socials
from socialsync.domain.model import Card, InvalidSocials, LegacySocials
from socialsync.domain.reconciliation import sync_socials_from_chain
from tests.helpers.cards import FakeReader, legacy, make_card, structured

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def _seed(factory: Callable[[], SqlAlchemyCardUnitOfWork], *cards: Card) -> None:
    with factory() as uow:
        for card in cards:
            uow.repositories.cards.add(card)
        uow.commit()


def _load(factory: Callable[[], SqlAlchemyCardUnitOfWork], card: Card) -> Card:
    with factory() as uow:
        loaded = uow.repositories.cards.get(card.id)
    assert loaded is not None
    return loaded


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError):
        SqlAlchemyCardUnitOfWork()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
        assert is_started()
    finally:
        shutdown()
    assert not is_started()


def test_rollback_on_exception(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCardUnitOfWork],
) -> None:
    card = make_card(1)

    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.cards.add(card)
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.cards.list_all() == []


def test_commit_failure_becomes_persistence_error(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCardUnitOfWork],
) -> None:
    card = make_card(1, socials=structured(x="jack"))
    _seed(sqlite_unit_of_work, card)

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.cards.get(card.id)
        assert loaded is not None
        loaded.socials = LegacySocials(handles={"x": "jack"})
        with pytest.raises(PersistenceError):
            uow.commit()

    assert _load(sqlite_unit_of_work, card).socials == structured(x="jack")


def test_migration_end_to_end(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCardUnitOfWork],
) -> None:
    legacy_card = make_card(1, socials=legacy(github="octocat", x="  "))
    migrated_card = make_card(2, socials=structured(x=("jack", True)))
    _seed(sqlite_unit_of_work, legacy_card, migrated_card)
    now = datetime(2025, 6, 1, tzinfo=UTC)

    dry = migrate_socials(unit_of_work_factory=sqlite_unit_of_work, now_provider=lambda: now)
    assert _load(sqlite_unit_of_work, legacy_card).socials == legacy(github="octocat", x="  ")

    live = migrate_socials(
        unit_of_work_factory=sqlite_unit_of_work,
        mode=RunMode.EXECUTE,
        now_provider=lambda: now,
    )
    again = migrate_socials(unit_of_work_factory=sqlite_unit_of_work, mode=RunMode.EXECUTE)

    assert len(dry.changes) == len(live.changes) == 1
    assert live.migrated == 1
    assert again.migrated == 0
    assert again.skipped_already_migrated == 2
    stored = _load(sqlite_unit_of_work, legacy_card)
    assert stored.socials == structured(github="octocat")
    assert stored.updated_at == now
    assert _load(sqlite_unit_of_work, migrated_card).socials == structured(x=("jack", True))


def test_sync_end_to_end(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCardUnitOfWork],
) -> None:
    card = make_card(1, socials=structured(x=("bob", True), github="octocat"))
    untouched = make_card(2, socials=structured(github="Alice"))
    _seed(sqlite_unit_of_work, card, untouched)
    reader = FakeReader({(1, "twitter"): "Bobby", (2, "github"): "alice"})

    result = sync_socials_from_chain(
        unit_of_work_factory=sqlite_unit_of_work,
        reader=reader,
        mode=RunMode.EXECUTE,
    )

    assert result.updated == 1
    assert _load(sqlite_unit_of_work, card).socials == structured(
        x=("Bobby", False), github="octocat"
    )
    stored_untouched = _load(sqlite_unit_of_work, untouched)
    assert stored_untouched.socials == structured(github="Alice")
    assert stored_untouched.updated_at is None


def test_invalid_rows_are_never_rewritten(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCardUnitOfWork],
) -> None:
    card = make_card(1, socials=structured(x="jack"))
    _seed(sqlite_unit_of_work, card)
    with sqlite_unit_of_work() as uow:
        uow.session.execute(
            text("UPDATE basecards SET socials = :socials"),
            {"socials": '{"x": 1}'},
        )
        uow.commit()

    result = migrate_socials(unit_of_work_factory=sqlite_unit_of_work, mode=RunMode.EXECUTE)

    assert result.invalid == 1
    assert isinstance(_load(sqlite_unit_of_work, card).socials, InvalidSocials)
