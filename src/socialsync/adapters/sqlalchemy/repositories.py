"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from socialsync.adapters.sqlalchemy.mappings import basecard_table
from socialsync.domain.model import Card

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyCardRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Card) -> None:
        self.session.add(entity)

    def get(self, card_id: UUID) -> Card | None:
        return self.session.get(Card, card_id)

    def list_all(self) -> list[Card]:
        stmt = select(Card).order_by(
            basecard_table.c.token_id.asc().nulls_last(),
            basecard_table.c.id,
        )
        return list(self.session.execute(stmt).scalars())

    def list_minted(self, *, require_socials: bool = False) -> list[Card]:
        stmt = select(Card).where(basecard_table.c.token_id.is_not(None))
        if require_socials:
            stmt = stmt.where(basecard_table.c.socials.is_not(None))
        stmt = stmt.order_by(basecard_table.c.token_id.asc())
        return list(self.session.execute(stmt).scalars())
