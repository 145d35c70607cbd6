"""Pure classification of stored handles against attested handles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import FieldComparison, FieldStatus, chain_text

if TYPE_CHECKING:
    from socialsync.domain.model import SocialKey
    from socialsync.domain.ports.chain import ChainRead


def normalize_handle(value: str) -> str:
    """Comparison form of a handle: surrounding whitespace and case are ignored."""

    return value.strip().casefold()


def classify(db_handle: str, chain_value: str) -> FieldStatus:
    """Classify one pair of raw handles.

    ``chain_value`` is ``""`` both for an empty attestation and for a failed read.
    """

    normalized_db = normalize_handle(db_handle)
    normalized_chain = normalize_handle(chain_value)
    if normalized_db == normalized_chain:
        return FieldStatus.MATCH
    if not normalized_chain:
        return FieldStatus.DB_ONLY
    if not normalized_db:
        return FieldStatus.CHAIN_ONLY
    return FieldStatus.MISMATCH


def compare_field(
    key: SocialKey,
    *,
    offchain_key: str,
    db_handle: str,
    chain: ChainRead,
) -> FieldComparison:
    return FieldComparison(
        key=key,
        offchain_key=offchain_key,
        db_handle=db_handle,
        chain=chain,
        status=classify(db_handle, chain_text(chain)),
    )
