"""Synchronous social attestation reader backed by the BaseCard contract."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Self

from socialsync.adapters.http_resilience import ResilientClient
from socialsync.domain.errors import ChainReadError
from socialsync.domain.ports.chain import ChainReadFailure, ChainValue

from .client import BaseCardContractClient

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from socialsync.config.chain import ChainConfig
    from socialsync.config.http_resilience import ResilienceConfig
    from socialsync.domain.model import SocialKey
    from socialsync.domain.ports.chain import ChainRead

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ChainSocialReader:
    """Reads ``getSocial`` for one token and key per call.

    Calls are blocking and sequential. One event loop and one HTTP client serve
    every read between :meth:`__enter__` and :meth:`__exit__`; nothing is cached,
    so each run sees the chain as it is now.
    """

    def __init__(
        self,
        config: ChainConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
    ) -> None:
        self.config = config
        self._client_factory = client_factory
        self._runner: asyncio.Runner | None = None
        self._http: ResilientClient | None = None
        self._contract: BaseCardContractClient | None = None

    def __enter__(self) -> Self:
        self._runner = asyncio.Runner()
        self._http = self._client_factory(self.config.resilience)
        self._contract = BaseCardContractClient(
            self._http,
            contract_address=self.config.contract_address,
            rpc_url=self.config.rpc_url,
        )
        log.info(
            "Reading BaseCard %s on %s (chain id %s)",
            self.config.contract_address,
            self.config.network_name,
            self.config.chain_id,
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._runner is None:
            return
        try:
            if self._http is not None:
                self._runner.run(self._http.aclose())
        finally:
            self._runner.close()
            self._runner = None
            self._http = None
            self._contract = None

    def read(self, token_id: int, key: SocialKey) -> ChainRead:
        if self._runner is None or self._contract is None:
            raise RuntimeError("ChainSocialReader used outside of its context manager")
        try:
            value = self._runner.run(self._contract.get_social(token_id, key.value))
        except ChainReadError as exc:
            log.debug("getSocial(%s, %s) failed: %s", token_id, key, exc)
            return ChainReadFailure(reason=str(exc))
        log.debug("getSocial(%s, %s) -> %r", token_id, key, value)
        return ChainValue(value=value)
