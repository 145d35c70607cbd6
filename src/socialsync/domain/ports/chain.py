"""Port for reading social attestations from the chain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from socialsync.domain.model import SocialKey


@dataclass(frozen=True, slots=True)
class ChainValue:
    """Successful read; ``value`` is ``""`` when nothing is attested."""

    value: str


@dataclass(frozen=True, slots=True)
class ChainReadFailure:
    """The read did not complete, so the attested value is unknown."""

    reason: str


type ChainRead = ChainValue | ChainReadFailure


@runtime_checkable
class SocialAttestationReader(Protocol):
    """Single authoritative read of ``getSocial(token_id, key)``.

    Implementations never raise for a failed read; they return
    :class:`ChainReadFailure` instead.
    """

    def read(self, token_id: int, key: SocialKey) -> ChainRead: ...
