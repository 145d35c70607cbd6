"""Errors raised while migrating or reconciling socials."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class SocialSyncError(RuntimeError):
    """Base class for per-row failures that never abort a batch."""


class RowShapeError(SocialSyncError):
    """A card's socials document cannot be used by the requested operation."""

    def __init__(self, card_id: UUID, reason: str) -> None:
        super().__init__(f"Card {card_id}: {reason}")
        self.card_id = card_id
        self.reason = reason


class ChainReadError(SocialSyncError):
    """Reading one attestation from the chain failed."""


class PersistenceError(SocialSyncError):
    """Writing one card to the store failed."""
