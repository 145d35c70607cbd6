"""BaseCard contract adapter."""

from __future__ import annotations

from .abi import GET_SOCIAL_SELECTOR, GET_SOCIAL_SIGNATURE, decode_string_result, encode_get_social
from .client import BaseCardContractClient
from .reader import ChainSocialReader

__all__ = [
    "GET_SOCIAL_SELECTOR",
    "GET_SOCIAL_SIGNATURE",
    "BaseCardContractClient",
    "ChainSocialReader",
    "decode_string_result",
    "encode_get_social",
]
