"""Decode/encode the ``basecards.socials`` JSON column.

Decoding never raises: whatever is stored comes back as one of the tagged
document variants. Encoding only accepts structured documents, so the legacy
shape cannot be written back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, TypeAdapter, ValidationError

from socialsync.domain.model import (
    AbsentSocials,
    InvalidSocials,
    LegacySocials,
    SocialEntry,
    StructuredSocials,
)

if TYPE_CHECKING:
    from socialsync.domain.model import SocialsDocument

log = logging.getLogger(__name__)


class SocialEntryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    handle: StrictStr
    verified: StrictBool = False


_STRUCTURED_ADAPTER: TypeAdapter[dict[str, SocialEntryPayload]] = TypeAdapter(
    dict[str, SocialEntryPayload]
)
_LEGACY_ADAPTER: TypeAdapter[dict[str, StrictStr | None]] = TypeAdapter(
    dict[str, StrictStr | None]
)


def decode_socials(raw: object) -> SocialsDocument:
    if raw is None:
        return AbsentSocials()
    if not isinstance(raw, dict):
        return InvalidSocials(
            reason=f"socials must be a JSON object, got {type(raw).__name__}",
            raw=raw,
        )
    document = cast(dict[str, Any], raw)
    if not document:
        return StructuredSocials()

    try:
        payloads = _STRUCTURED_ADAPTER.validate_python(document)
    except ValidationError:
        pass
    else:
        return _structured_from_payloads(payloads)

    try:
        handles = _LEGACY_ADAPTER.validate_python(document)
    except ValidationError as exc:
        return InvalidSocials(
            reason=f"socials match neither the structured nor the legacy shape "
            f"({exc.error_count()} validation errors)",
            raw=raw,
        )
    return LegacySocials(handles=handles)


def _structured_from_payloads(payloads: dict[str, SocialEntryPayload]) -> StructuredSocials:
    entries: dict[str, SocialEntry] = {}
    for key, payload in payloads.items():
        if not payload.handle.strip():
            # a blank handle is the same as no entry
            log.debug("Dropping blank handle for %s", key)
            continue
        entries[key] = SocialEntry(handle=payload.handle, verified=payload.verified)
    return StructuredSocials(entries=entries)


def encode_socials(document: SocialsDocument | None) -> dict[str, dict[str, object]] | None:
    match document:
        case None | AbsentSocials():
            return None
        case StructuredSocials():
            return document.to_payload()
        case _:
            msg = f"Refusing to persist a {document.schema} socials document"
            raise TypeError(msg)
