"""Domain model for cards and their social handles."""

from __future__ import annotations

from .card import Card, new_id
from .socials import (
    CHAIN_KEY_ALIASES,
    AbsentSocials,
    InvalidSocials,
    LegacySocials,
    SocialEntry,
    SocialKey,
    SocialsDocument,
    SocialsSchema,
    StructuredSocials,
    offchain_key,
)

__all__ = [
    "CHAIN_KEY_ALIASES",
    "AbsentSocials",
    "Card",
    "InvalidSocials",
    "LegacySocials",
    "SocialEntry",
    "SocialKey",
    "SocialsDocument",
    "SocialsSchema",
    "StructuredSocials",
    "new_id",
    "offchain_key",
]
