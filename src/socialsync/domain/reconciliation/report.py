"""Read-only verification of stored socials against the chain."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from socialsync.domain.errors import RowShapeError

from .contracts import FieldComparison, FieldStatus
from .engine import compare_card

if TYPE_CHECKING:
    from collections.abc import Sequence

    from socialsync.domain.model import Card
    from socialsync.domain.ports.chain import SocialAttestationReader
    from socialsync.domain.ports.unit_of_work import CardUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class VerificationReport:
    """Field-level match/mismatch/error totals over one batch.

    Counts are per stored field, so ``x`` and its ``twitter`` alias count once.
    """

    cards_checked: int = 0
    matched: int = 0
    mismatched: int = 0
    errors: int = 0
    invalid: int = 0
    fields: list[FieldComparison] = field(default_factory=list[FieldComparison])

    @property
    def fully_consistent(self) -> bool:
        return self.mismatched == 0 and self.errors == 0

    def record(self, comparison: FieldComparison) -> None:
        """Add one field classification to the totals.

        A failed read is an error only when the store has a handle for that key;
        otherwise there is nothing to verify and the field is not counted.
        """

        if comparison.read_failed:
            if comparison.db_handle:
                self.errors += 1
                self.fields.append(comparison)
            return
        self.fields.append(comparison)
        if comparison.status is FieldStatus.MATCH:
            self.matched += 1
        else:
            self.mismatched += 1


def verify_socials(
    *,
    unit_of_work_factory: Callable[[], CardUnitOfWork],
    reader: SocialAttestationReader,
) -> VerificationReport:
    """Compare every minted card with socials against its attestations."""

    report = VerificationReport()
    with unit_of_work_factory() as uow:
        cards = uow.repositories.cards.list_minted(require_socials=True)
        log.info("Found %s minted cards with socials", len(cards))
        for card in cards:
            _verify_card(card, reader=reader, report=report)

    log.info(
        "Verification summary: cards=%s, matched=%s, mismatched=%s, errors=%s, invalid=%s",
        report.cards_checked,
        report.matched,
        report.mismatched,
        report.errors,
        report.invalid,
    )
    if report.fully_consistent:
        log.info("All socials verified successfully")
    else:
        log.warning("Some socials need attention")
    return report


def _verify_card(
    card: Card,
    *,
    reader: SocialAttestationReader,
    report: VerificationReport,
) -> None:
    try:
        comparisons = compare_card(card, reader)
    except RowShapeError as exc:
        log.warning("Skipping card %s: %s", card.id, exc.reason)
        report.invalid += 1
        return

    report.cards_checked += 1
    log.info("[Token #%s] %s (%s)", card.token_id, card.label, card.token_owner)
    for field_comparisons in _group_by_field(comparisons).values():
        comparison = resolve_field(field_comparisons)
        report.record(comparison)
        _log_comparison(comparison)


def _group_by_field(
    comparisons: Sequence[FieldComparison],
) -> dict[str, list[FieldComparison]]:
    grouped: dict[str, list[FieldComparison]] = {}
    for comparison in comparisons:
        grouped.setdefault(comparison.offchain_key, []).append(comparison)
    return grouped


def resolve_field(comparisons: Sequence[FieldComparison]) -> FieldComparison:
    """Pick the comparison that decides one stored field.

    Several chain keys can attest the same stored key (``x`` and ``twitter``).
    The field agrees with the chain when any of them attests the stored handle;
    otherwise an unknown read of a stored handle makes it an error, then a
    differing attestation makes it a mismatch.
    """

    reads = [c for c in comparisons if not c.read_failed]
    failures = [c for c in comparisons if c.read_failed]
    for comparison in reads:
        if comparison.status is FieldStatus.MATCH and comparison.chain_value.strip():
            return comparison
    if failures and failures[0].db_handle:
        return failures[0]
    for comparison in reads:
        if comparison.chain_value.strip():
            return comparison
    return reads[0] if reads else failures[0]


def _log_comparison(comparison: FieldComparison) -> None:
    key = comparison.key
    if comparison.read_failed:
        if comparison.db_handle:
            log.info('  ? %s: DB="%s" (on-chain read failed)', key, comparison.db_handle)
        return
    if comparison.status is FieldStatus.MATCH:
        if comparison.db_handle or comparison.chain_value:
            log.info('  ✓ %s: "%s" (matches on-chain)', key, comparison.db_handle)
        return
    log.info(
        '  ✗ %s: DB="%s" vs OnChain="%s" (%s)',
        key,
        comparison.db_handle,
        comparison.chain_value,
        comparison.status,
    )
