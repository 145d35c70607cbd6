from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy import insert, select, text

from socialsync.adapters.sqlalchemy import basecard_table
from socialsync.adapters.sqlalchemy.repositories import SqlAlchemyCardRepository
from socialsync.domain.model import AbsentSocials, InvalidSocials, LegacySocials
from tests.helpers.cards import make_card, structured

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def test_add_and_get_round_trip(sqlite_session: Session) -> None:
    repo = SqlAlchemyCardRepository(sqlite_session)
    card = make_card(5, socials=structured(github=("octocat", True)))

    repo.add(card)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = repo.get(card.id)
    assert loaded is not None
    assert loaded is not card
    assert loaded.token_id == 5
    assert loaded.nickname == "alice"
    assert loaded.socials == structured(github=("octocat", True))


def test_socials_column_stores_structured_json(sqlite_session: Session) -> None:
    card = make_card(1, socials=structured(x="jack"))
    SqlAlchemyCardRepository(sqlite_session).add(card)
    sqlite_session.commit()

    raw = sqlite_session.execute(text("SELECT socials FROM basecards")).scalar_one()

    assert raw == '{"x": {"handle": "jack", "verified": false}}'


def test_null_socials_round_trip_as_absent(sqlite_session: Session) -> None:
    card = make_card(1)
    repo = SqlAlchemyCardRepository(sqlite_session)
    repo.add(card)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    raw = sqlite_session.execute(select(basecard_table.c.socials)).scalar_one()
    loaded = repo.get(card.id)

    assert raw == AbsentSocials()
    assert loaded is not None
    assert loaded.socials == AbsentSocials()
    assert sqlite_session.execute(text("SELECT socials IS NULL FROM basecards")).scalar_one() == 1


def test_rows_written_by_other_services_are_decoded(sqlite_session: Session) -> None:
    sqlite_session.execute(
        insert(basecard_table),
        [
            {"token_owner": "0x1", "token_id": 1, "socials": None},
        ],
    )
    sqlite_session.execute(
        text(
            "INSERT INTO basecards (id, token_owner, token_id, socials) VALUES "
            "('00000000000000000000000000000002', '0x2', 2, '{\"github\": \"octocat\"}'), "
            "('00000000000000000000000000000003', '0x3', 3, '[1, 2]')"
        )
    )
    sqlite_session.commit()

    cards = SqlAlchemyCardRepository(sqlite_session).list_minted()

    assert [card.token_id for card in cards] == [1, 2, 3]
    assert cards[0].socials == AbsentSocials()
    assert cards[1].socials == LegacySocials(handles={"github": "octocat"})
    assert isinstance(cards[2].socials, InvalidSocials)


def test_list_minted_orders_by_token_and_filters(sqlite_session: Session) -> None:
    repo = SqlAlchemyCardRepository(sqlite_session)
    for card in (
        make_card(3, socials=structured(x="c")),
        make_card(None, socials=structured(x="unminted")),
        make_card(1),
        make_card(2, socials=structured(x="b")),
    ):
        repo.add(card)
    sqlite_session.commit()

    assert [card.token_id for card in repo.list_minted()] == [1, 2, 3]
    assert [card.token_id for card in repo.list_minted(require_socials=True)] == [2, 3]
    assert len(repo.list_all()) == 4
    assert repo.list_all()[-1].token_id is None


def test_updated_at_is_stored_in_utc(sqlite_session: Session) -> None:
    repo = SqlAlchemyCardRepository(sqlite_session)
    card = make_card(1)
    card.updated_at = datetime(2025, 1, 1, 14, tzinfo=timezone(timedelta(hours=2)))
    repo.add(card)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = repo.get(card.id)

    assert loaded is not None
    assert loaded.updated_at == datetime(2025, 1, 1, 12, tzinfo=UTC)
    assert loaded.updated_at.tzinfo is not None
