"""Chain-to-store reconciliation of card socials.

The chain is read-only and authoritative only where it holds a value: an
attested handle that differs from the stored one replaces it (unverified),
while stored handles the chain does not attest are left alone. Nothing is
ever written on-chain.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from socialsync.domain.errors import PersistenceError, RowShapeError
from socialsync.domain.gate import RunMode, WriteGate
from socialsync.domain.model import (
    AbsentSocials,
    InvalidSocials,
    LegacySocials,
    SocialEntry,
    SocialKey,
    StructuredSocials,
    offchain_key,
)

from .classify import compare_field
from .contracts import CardDelta, CardReconciliation, FieldOverwrite, FieldStatus

if TYPE_CHECKING:
    from uuid import UUID

    from socialsync.domain.model import Card
    from socialsync.domain.ports.chain import SocialAttestationReader
    from socialsync.domain.ports.unit_of_work import CardUnitOfWork

    from .contracts import FieldComparison

log = getLogger(__name__)


@dataclass(slots=True)
class SyncResult:
    """Outcome of one chain-to-store sync batch.

    ``deltas`` is identical in both run modes; ``updated`` only grows when the
    mode persists.
    """

    mode: RunMode
    cards: int = 0
    updated: int = 0
    invalid: int = 0
    errors: int = 0
    deltas: list[CardDelta] = field(default_factory=list[CardDelta])
    status_counts: Counter[FieldStatus] = field(default_factory=Counter[FieldStatus])
    read_failures: int = 0
    failed_card_ids: list[UUID] = field(default_factory=list["UUID"])

    @property
    def changed(self) -> int:
        return len(self.deltas)


def structured_socials(card: Card) -> StructuredSocials:
    """Return the card's socials as a structured set.

    A NULL document is an empty set. Legacy and invalid documents raise
    :class:`RowShapeError`; they have to go through the migrator first.
    """

    match card.socials:
        case StructuredSocials():
            return card.socials
        case AbsentSocials():
            return StructuredSocials()
        case LegacySocials():
            raise RowShapeError(card.id, "socials are still in the legacy format")
        case InvalidSocials(reason=reason):
            raise RowShapeError(card.id, reason)


def _require_token_id(card: Card) -> int:
    if card.token_id is None:
        raise RowShapeError(card.id, "card has not been minted")
    return card.token_id


def compare_card(card: Card, reader: SocialAttestationReader) -> tuple[FieldComparison, ...]:
    """Classify every key of ``card`` against the stored document as-is."""

    token_id = _require_token_id(card)
    socials = structured_socials(card)
    comparisons: list[FieldComparison] = []
    for key in SocialKey:
        target = offchain_key(key)
        comparisons.append(
            compare_field(
                key,
                offchain_key=target,
                db_handle=socials.handle(target),
                chain=reader.read(token_id, key),
            )
        )
    return tuple(comparisons)


def reconcile_card(card: Card, reader: SocialAttestationReader) -> CardReconciliation:
    """Classify every key of ``card`` and compute the chain-driven overwrite.

    Keys are processed in :class:`SocialKey` order against the progressively
    updated set, so two chain keys aliasing one off-chain key resolve to the
    later attestation. Overwrites that net out to the stored set produce no
    delta. The card itself is not modified.
    """

    token_id = _require_token_id(card)
    stored = socials = structured_socials(card)
    comparisons: list[FieldComparison] = []
    overwrites: list[FieldOverwrite] = []

    for key in SocialKey:
        target = offchain_key(key)
        comparison = compare_field(
            key,
            offchain_key=target,
            db_handle=socials.handle(target),
            chain=reader.read(token_id, key),
        )
        comparisons.append(comparison)
        if not comparison.chain_is_authoritative:
            continue
        overwrites.append(
            FieldOverwrite(
                key=key,
                offchain_key=target,
                previous=comparison.db_handle,
                handle=comparison.chain_value,
            )
        )
        socials = socials.with_entry(
            target,
            SocialEntry(handle=comparison.chain_value, verified=False),
        )

    delta: CardDelta | None = None
    if overwrites and socials != stored:
        delta = CardDelta(
            card_id=card.id,
            token_id=token_id,
            label=card.label,
            overwrites=tuple(overwrites),
            socials=socials,
        )
    return CardReconciliation(
        card_id=card.id,
        token_id=token_id,
        comparisons=tuple(comparisons),
        delta=delta,
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


def sync_socials_from_chain(
    *,
    unit_of_work_factory: Callable[[], CardUnitOfWork],
    reader: SocialAttestationReader,
    mode: RunMode = RunMode.DRY_RUN,
    now_provider: Callable[[], datetime] = _utcnow,
) -> SyncResult:
    """Align every minted card's socials with its on-chain attestations.

    Cards without overwrites are never written. Each changed card is committed
    in its own transaction, after all of its reads; a failed write is counted
    and does not affect the other cards.
    """

    gate = WriteGate(mode)
    result = SyncResult(mode=mode)

    with unit_of_work_factory() as uow:
        cards = uow.repositories.cards.list_minted()
        result.cards = len(cards)
        log.info("Found %s minted cards (%s)", len(cards), mode)

        for card in cards:
            _sync_card(uow, card, reader=reader, gate=gate, result=result, now=now_provider)

    log.info(
        "Sync summary (%s): cards=%s, changed=%s, updated=%s, invalid=%s, errors=%s, "
        "read_failures=%s",
        mode,
        result.cards,
        result.changed,
        result.updated,
        result.invalid,
        result.errors,
        result.read_failures,
    )
    return result


def _sync_card(
    uow: CardUnitOfWork,
    card: Card,
    *,
    reader: SocialAttestationReader,
    gate: WriteGate,
    result: SyncResult,
    now: Callable[[], datetime],
) -> None:
    try:
        reconciliation = reconcile_card(card, reader)
    except RowShapeError as exc:
        log.warning("Skipping card %s: %s", card.id, exc.reason)
        result.invalid += 1
        return

    for comparison in reconciliation.comparisons:
        result.status_counts[comparison.status] += 1
        if comparison.read_failed:
            result.read_failures += 1

    delta = reconciliation.delta
    if delta is None:
        return

    result.deltas.append(delta)
    log.info("[Token #%s] %s - Found changes:", delta.token_id, delta.label)
    for overwrite in delta.overwrites:
        log.info("  - %s", overwrite.describe())

    try:
        written = gate.write(uow, card, delta.socials, touched_at=now())
    except PersistenceError:
        log.exception("Failed to update card %s", card.id)
        result.errors += 1
        result.failed_card_ids.append(card.id)
        return
    if written:
        log.info("  DB updated")
        result.updated += 1
    else:
        log.info("  Pass --execute to update")
