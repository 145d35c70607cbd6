"""Dry-run/execute gate shared by the migrator and the reconciler.

Both modes compute exactly the same changes; the gate only decides whether a
computed change reaches the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from socialsync.domain.model import Card, StructuredSocials
    from socialsync.domain.ports.unit_of_work import CardUnitOfWork

log = getLogger(__name__)


class RunMode(StrEnum):
    DRY_RUN = "dry-run"
    EXECUTE = "execute"

    @classmethod
    def from_flag(cls, *, execute: bool) -> RunMode:
        return cls.EXECUTE if execute else cls.DRY_RUN

    @property
    def persists(self) -> bool:
        return self is RunMode.EXECUTE


@dataclass(frozen=True, slots=True)
class WriteGate:
    mode: RunMode = RunMode.DRY_RUN

    def write(
        self,
        uow: CardUnitOfWork,
        card: Card,
        socials: StructuredSocials,
        *,
        touched_at: datetime,
    ) -> bool:
        """Persist ``socials`` for ``card`` in its own transaction.

        Returns ``False`` without touching the card in dry-run mode. Raises
        ``PersistenceError`` when the commit fails.
        """

        if not self.mode.persists:
            log.debug("Dry run: not writing card %s", card.id)
            return False
        card.socials = socials
        card.updated_at = touched_at
        uow.commit()
        return True
