"""JSON-RPC client for the BaseCard contract."""

from __future__ import annotations

import itertools
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from eth_utils import decode_hex
from pydantic import ValidationError

from socialsync.domain.errors import ChainReadError

from .abi import decode_string_result, encode_get_social
from .schema import EthCallParams, JsonRpcRequest, JsonRpcResponse

if TYPE_CHECKING:
    from socialsync.adapters.http_resilience import ResilientClient

log = getLogger(__name__)


class BaseCardContractClient:
    """Issues ``eth_call`` requests against ``getSocial`` at the latest block."""

    def __init__(self, client: ResilientClient, *, contract_address: str, rpc_url: str) -> None:
        self._client = client
        self.contract_address = contract_address
        self.rpc_url = rpc_url
        self._ids = itertools.count(1)

    async def get_social(self, token_id: int, key: str) -> str:
        """Return the attested handle, ``""`` when none is set.

        Raises :class:`ChainReadError` for transport failures, RPC errors such as
        reverts, and undecodable output.
        """

        request = JsonRpcRequest(
            id=next(self._ids),
            method="eth_call",
            params=[
                EthCallParams(
                    to=self.contract_address,
                    data=encode_get_social(token_id, key),
                ).model_dump(),
                "latest",
            ],
        )
        try:
            response = await self._client.post(self.rpc_url, json=request.model_dump())
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ChainReadError(f"RPC request failed: {exc}") from exc

        try:
            payload = JsonRpcResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise ChainReadError(f"Malformed RPC response: {exc.error_count()} errors") from exc

        if payload.error is not None:
            raise ChainReadError(f"RPC error {payload.error.code}: {payload.error.message}")
        if payload.result is None:
            raise ChainReadError("RPC response has neither result nor error")

        try:
            return decode_string_result(decode_hex(payload.result))
        except ValueError as exc:
            raise ChainReadError(f"Cannot decode getSocial output: {exc}") from exc
