"""Migration of legacy flat socials documents to the structured shape."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from socialsync.domain.errors import PersistenceError, RowShapeError
from socialsync.domain.gate import RunMode, WriteGate
from socialsync.domain.model import (
    AbsentSocials,
    InvalidSocials,
    LegacySocials,
    SocialEntry,
    StructuredSocials,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from socialsync.domain.model import Card, SocialsDocument
    from socialsync.domain.ports.unit_of_work import CardUnitOfWork

log = getLogger(__name__)


class MigrationAction(StrEnum):
    MIGRATE = "migrate"
    SKIP_EMPTY = "empty"
    SKIP_ALREADY_MIGRATED = "already_migrated"


@dataclass(frozen=True, slots=True)
class MigrationDecision:
    action: MigrationAction
    socials: StructuredSocials = field(default_factory=StructuredSocials)
    before: Mapping[str, str | None] = field(default_factory=dict[str, str | None])


@dataclass(frozen=True, slots=True, kw_only=True)
class MigrationChange:
    card_id: UUID
    token_owner: str
    before: Mapping[str, str | None]
    after: StructuredSocials


@dataclass(slots=True)
class MigrationResult:
    """Outcome of one migration batch."""

    mode: RunMode
    candidates: int = 0
    migrated: int = 0
    skipped_empty: int = 0
    skipped_already_migrated: int = 0
    invalid: int = 0
    errors: int = 0
    changes: list[MigrationChange] = field(default_factory=list[MigrationChange])
    failed_card_ids: list[UUID] = field(default_factory=list["UUID"])

    @property
    def skipped(self) -> int:
        return self.skipped_empty + self.skipped_already_migrated


def migrate_legacy_handles(handles: Mapping[str, str | None]) -> StructuredSocials:
    """Wrap every non-blank legacy handle in an unverified entry.

    Handles are carried over verbatim; blank and null values are dropped.
    """

    entries: dict[str, SocialEntry] = {}
    for key, value in handles.items():
        if value is None or not value.strip():
            continue
        entries[key] = SocialEntry(handle=value, verified=False)
    return StructuredSocials(entries=entries)


def plan_migration(document: SocialsDocument) -> MigrationDecision:
    """Decide what migrating ``document`` means, without side effects.

    Raises ``ValueError`` for an invalid document; callers attach the card id.
    """

    match document:
        case AbsentSocials():
            return MigrationDecision(MigrationAction.SKIP_EMPTY)
        case StructuredSocials() if document.is_empty:
            # an empty container has no first value to tell its shape by
            return MigrationDecision(
                MigrationAction.MIGRATE, socials=StructuredSocials(), before={}
            )
        case StructuredSocials():
            return MigrationDecision(MigrationAction.SKIP_ALREADY_MIGRATED)
        case LegacySocials(handles=handles):
            return MigrationDecision(
                MigrationAction.MIGRATE,
                socials=migrate_legacy_handles(handles),
                before=handles,
            )
        case InvalidSocials(reason=reason):
            raise ValueError(reason)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def migrate_socials(
    *,
    unit_of_work_factory: Callable[[], CardUnitOfWork],
    mode: RunMode = RunMode.DRY_RUN,
    now_provider: Callable[[], datetime] = _utcnow,
) -> MigrationResult:
    """Bring every card's socials document to the structured shape.

    Each migrated card is committed on its own; a failed write is counted and
    the batch moves on. Re-running after a partial failure only touches the
    cards that are still in the legacy shape or hold an empty document.
    """

    gate = WriteGate(mode)
    result = MigrationResult(mode=mode)

    with unit_of_work_factory() as uow:
        cards = uow.repositories.cards.list_all()
        result.candidates = len(cards)
        log.info("Found %s cards to inspect (%s)", len(cards), mode)

        for card in cards:
            _migrate_card(uow, card, gate=gate, result=result, now_provider=now_provider)

    log.info(
        "Migration summary (%s): total=%s, migrated=%s, planned=%s, skipped=%s "
        "(empty=%s, already_migrated=%s), invalid=%s, errors=%s",
        mode,
        result.candidates,
        result.migrated,
        len(result.changes),
        result.skipped,
        result.skipped_empty,
        result.skipped_already_migrated,
        result.invalid,
        result.errors,
    )
    return result


def _migrate_card(
    uow: CardUnitOfWork,
    card: Card,
    *,
    gate: WriteGate,
    result: MigrationResult,
    now_provider: Callable[[], datetime],
) -> None:
    try:
        decision = _decide(card)
    except RowShapeError as exc:
        log.warning("Skipping card %s: %s", card.id, exc.reason)
        result.invalid += 1
        return

    if decision.action is MigrationAction.SKIP_EMPTY:
        result.skipped_empty += 1
        return
    if decision.action is MigrationAction.SKIP_ALREADY_MIGRATED:
        log.debug("Skipping %s - already migrated", card.id)
        result.skipped_already_migrated += 1
        return

    socials = decision.socials
    change = MigrationChange(
        card_id=card.id,
        token_owner=card.token_owner,
        before=decision.before,
        after=socials,
    )
    result.changes.append(change)
    log.info(
        "%s %s (%s): %s -> %s",
        "Migrating" if gate.mode.persists else "Would migrate",
        card.id,
        card.token_owner,
        dict(change.before),
        socials.to_payload(),
    )

    try:
        written = gate.write(uow, card, socials, touched_at=now_provider())
    except PersistenceError:
        log.exception("Failed to migrate %s", card.id)
        result.errors += 1
        result.failed_card_ids.append(card.id)
        return
    if written:
        result.migrated += 1


def _decide(card: Card) -> MigrationDecision:
    try:
        return plan_migration(card.socials)
    except ValueError as exc:
        raise RowShapeError(card.id, str(exc)) from exc
