"""Shared reconciliation value types.

Per-field and per-card records passed between classification, the sync policy
and the reporter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from socialsync.domain.ports.chain import ChainReadFailure, ChainValue

if TYPE_CHECKING:
    from uuid import UUID

    from socialsync.domain.model import SocialKey, StructuredSocials
    from socialsync.domain.ports.chain import ChainRead


def chain_text(chain: ChainRead) -> str:
    """Raw attested value; an unknown read counts as empty."""

    match chain:
        case ChainValue(value=value):
            return value
        case ChainReadFailure():
            return ""


class FieldStatus(StrEnum):
    """Relationship between the stored handle and the attested handle."""

    MATCH = "match"
    MISMATCH = "mismatch"
    DB_ONLY = "db_only"
    CHAIN_ONLY = "chain_only"


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldComparison:
    """Classification of one (card, key) pair."""

    key: SocialKey
    offchain_key: str
    db_handle: str
    chain: ChainRead
    status: FieldStatus

    @property
    def chain_value(self) -> str:
        return chain_text(self.chain)

    @property
    def read_failed(self) -> bool:
        return isinstance(self.chain, ChainReadFailure)

    @property
    def chain_is_authoritative(self) -> bool:
        """Chain holds a value that differs from the store."""

        return self.status in {FieldStatus.MISMATCH, FieldStatus.CHAIN_ONLY}


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldOverwrite:
    """One off-chain entry replaced by its attested value."""

    key: SocialKey
    offchain_key: str
    previous: str
    handle: str

    def describe(self) -> str:
        return f'{self.offchain_key}: "{self.previous}" -> "{self.handle}"'


@dataclass(frozen=True, slots=True, kw_only=True)
class CardDelta:
    """Changes the sync policy wants to apply to one card."""

    card_id: UUID
    token_id: int
    label: str
    overwrites: tuple[FieldOverwrite, ...]
    socials: StructuredSocials


@dataclass(frozen=True, slots=True, kw_only=True)
class CardReconciliation:
    """All field classifications for one card plus the resulting delta, if any."""

    card_id: UUID
    token_id: int
    comparisons: tuple[FieldComparison, ...]
    delta: CardDelta | None = None

    @property
    def has_changes(self) -> bool:
        return self.delta is not None
