"""Social handle value objects and the tagged socials document.

A card's ``socials`` column has gone through two shapes over time:

* legacy: ``{"github": "octocat", "x": "jack"}``
* structured: ``{"github": {"handle": "octocat", "verified": false}}``

The store boundary decodes the raw column into exactly one of the document
variants below, so the rest of the code branches on ``schema`` instead of
sniffing JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping


class SocialKey(StrEnum):
    """Keys read from the BaseCard contract, in reconciliation order."""

    GITHUB = "github"
    X = "x"
    TWITTER = "twitter"
    FARCASTER = "farcaster"
    LINKEDIN = "linkedin"


# chain key -> off-chain key; keys not listed map to themselves
CHAIN_KEY_ALIASES: Final[Mapping[SocialKey, str]] = MappingProxyType(
    {SocialKey.TWITTER: SocialKey.X.value}
)


def offchain_key(key: SocialKey) -> str:
    """Return the ``socials`` document key that stores ``key``."""

    return CHAIN_KEY_ALIASES.get(key, key.value)


@dataclass(frozen=True, slots=True)
class SocialEntry:
    """One platform handle plus its verification flag."""

    handle: str
    verified: bool = False

    def __post_init__(self) -> None:
        if not self.handle.strip():
            raise ValueError("Social handle must not be blank")

    def to_payload(self) -> dict[str, object]:
        return {"handle": self.handle, "verified": self.verified}


class SocialsSchema(StrEnum):
    """Schema tag of a decoded socials document."""

    ABSENT = "absent"
    LEGACY = "legacy"
    STRUCTURED = "structured"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class AbsentSocials:
    """The column is NULL."""

    schema: Literal[SocialsSchema.ABSENT] = SocialsSchema.ABSENT


@dataclass(frozen=True, slots=True, kw_only=True)
class LegacySocials:
    """Flat ``key -> handle`` mapping written before handles could be verified."""

    handles: Mapping[str, str | None]
    schema: Literal[SocialsSchema.LEGACY] = SocialsSchema.LEGACY


@dataclass(frozen=True, slots=True, kw_only=True)
class StructuredSocials:
    """The current ``key -> {handle, verified}`` shape.

    Instances are immutable; use :meth:`with_entry` to derive an updated set.
    """

    entries: Mapping[str, SocialEntry] = field(default_factory=dict[str, SocialEntry])
    schema: Literal[SocialsSchema.STRUCTURED] = SocialsSchema.STRUCTURED

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def get(self, key: str) -> SocialEntry | None:
        return self.entries.get(key)

    def handle(self, key: str) -> str:
        """Return the handle stored under ``key`` or ``""`` when there is no entry."""

        entry = self.entries.get(key)
        return entry.handle if entry is not None else ""

    def with_entry(self, key: str, entry: SocialEntry) -> StructuredSocials:
        updated = dict(self.entries)
        updated[key] = entry
        return StructuredSocials(entries=updated)

    def to_payload(self) -> dict[str, dict[str, object]]:
        return {key: entry.to_payload() for key, entry in self.entries.items()}


@dataclass(frozen=True, slots=True, kw_only=True)
class InvalidSocials:
    """Column content that matches neither known shape."""

    reason: str
    raw: object = field(default=None, repr=False, compare=False)
    schema: Literal[SocialsSchema.INVALID] = SocialsSchema.INVALID


type SocialsDocument = AbsentSocials | LegacySocials | StructuredSocials | InvalidSocials
