"""ABI encoding for the BaseCard ``getSocial`` view function."""

from __future__ import annotations

from typing import Final

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_hex

GET_SOCIAL_SIGNATURE: Final[str] = "getSocial(uint256,string)"
GET_SOCIAL_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(GET_SOCIAL_SIGNATURE)


class AbiDecodeError(ValueError):
    """Raised when call output cannot be decoded as a single ``string``."""


def encode_get_social(token_id: int, key: str) -> str:
    """Return the hex calldata for ``getSocial(token_id, key)``."""

    return to_hex(GET_SOCIAL_SELECTOR + encode(["uint256", "string"], [token_id, key]))


def decode_string_result(data: bytes) -> str:
    if not data:
        raise AbiDecodeError("empty call output")
    try:
        (value,) = decode(["string"], data)
    except (DecodingError, UnicodeDecodeError) as exc:
        raise AbiDecodeError(str(exc)) from exc
    return value
