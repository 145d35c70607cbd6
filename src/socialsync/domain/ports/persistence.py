"""Ports for persisting cards."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from socialsync.domain.model import Card


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CardRepository(Repository["Card"], Protocol):
    """Persistence contract for cards."""

    def get(self, card_id: UUID) -> Card | None: ...

    def list_all(self) -> list[Card]:
        """Every card, including unminted ones and NULL documents."""
        ...

    def list_minted(self, *, require_socials: bool = False) -> list[Card]:
        """Cards with a token id, ordered by token id."""
        ...
