"""Card aggregate as seen by the socials engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from socialsync.domain.model.socials import AbsentSocials, SocialsDocument

if TYPE_CHECKING:
    from datetime import datetime


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Card:
    """NFT-bound profile record.

    Only the columns the socials engine reads or writes are modelled; the rest of
    the ``basecards`` row belongs to the API service.
    """

    id: UUID = field(default_factory=new_id)
    token_owner: str
    token_id: int | None = None
    nickname: str | None = None
    socials: SocialsDocument = field(default_factory=AbsentSocials)
    updated_at: datetime | None = None

    @property
    def is_minted(self) -> bool:
        return self.token_id is not None

    @property
    def label(self) -> str:
        return self.nickname or "N/A"
