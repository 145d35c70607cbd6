"""On-chain (BaseCard contract) configuration values."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

BASE_MAINNET_CHAIN_ID: Final[int] = 8453
BASE_SEPOLIA_CHAIN_ID: Final[int] = 84532
DEFAULT_CHAIN_ID: Final[int] = BASE_SEPOLIA_CHAIN_ID

CHAIN_RPC_TIMEOUT_SECONDS: Final[float] = 15.0

_NETWORKS: Final[dict[int, tuple[str, str]]] = {
    BASE_MAINNET_CHAIN_ID: ("Base", "https://mainnet.base.org"),
    BASE_SEPOLIA_CHAIN_ID: ("Base Sepolia", "https://sepolia.base.org"),
}

_ADDRESS_PATTERN: Final[re.Pattern[str]] = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True, slots=True)
class ChainConfig:
    """Where and how to read BaseCard social attestations."""

    chain_id: int
    network_name: str
    rpc_url: str
    contract_address: str
    resilience: ResilienceConfig


def _parse_chain_id(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_CHAIN_ID
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"CHAIN_ID must be an integer, got {raw!r}") from exc


def _parse_rate_limit(raw: str | None) -> RateLimit | None:
    if raw is None:
        return None
    try:
        max_calls = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"CHAIN_RPC_MAX_CALLS_PER_SECOND must be an integer, got {raw!r}"
        ) from exc
    if max_calls <= 0:
        raise ConfigurationError("CHAIN_RPC_MAX_CALLS_PER_SECOND must be positive")
    return RateLimit(max_calls=max_calls, per_seconds=1.0)


def _first_rpc_url(raw: str | None) -> str | None:
    if raw is None:
        return None
    for candidate in raw.split(","):
        if candidate.strip():
            return candidate.strip()
    return None


def get_chain_config() -> ChainConfig:
    values = require_env_vars(("BASECARD_CONTRACT_ADDRESS",))
    contract_address = values["BASECARD_CONTRACT_ADDRESS"]
    if not _ADDRESS_PATTERN.match(contract_address):
        raise ConfigurationError(
            f"BASECARD_CONTRACT_ADDRESS is not a valid address: {contract_address!r}"
        )

    chain_id = _parse_chain_id(optional_env_var("CHAIN_ID"))
    # anything that is not mainnet reads from Sepolia
    network_name, default_rpc_url = _NETWORKS.get(chain_id, _NETWORKS[BASE_SEPOLIA_CHAIN_ID])
    rpc_url = _first_rpc_url(optional_env_var("BASE_HTTP_RPC_URLS")) or default_rpc_url

    return ChainConfig(
        chain_id=chain_id,
        network_name=network_name,
        rpc_url=rpc_url,
        contract_address=contract_address,
        resilience=ResilienceConfig(
            name="basecard-rpc",
            base_url=rpc_url,
            timeout_seconds=CHAIN_RPC_TIMEOUT_SECONDS,
            ratelimit=_parse_rate_limit(optional_env_var("CHAIN_RPC_MAX_CALLS_PER_SECOND")),
            default_headers={"Content-Type": "application/json"},
        ),
    )
