"""Reconciliation of stored socials with on-chain attestations."""

from __future__ import annotations

from .classify import classify, compare_field, normalize_handle
from .contracts import (
    CardDelta,
    CardReconciliation,
    FieldComparison,
    FieldOverwrite,
    FieldStatus,
)
from .engine import (
    SyncResult,
    compare_card,
    reconcile_card,
    structured_socials,
    sync_socials_from_chain,
)
from .report import VerificationReport, resolve_field, verify_socials

__all__ = [
    "CardDelta",
    "CardReconciliation",
    "FieldComparison",
    "FieldOverwrite",
    "FieldStatus",
    "SyncResult",
    "VerificationReport",
    "classify",
    "compare_card",
    "compare_field",
    "normalize_handle",
    "reconcile_card",
    "resolve_field",
    "structured_socials",
    "sync_socials_from_chain",
    "verify_socials",
]
