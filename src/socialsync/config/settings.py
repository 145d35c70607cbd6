"""Process-wide configuration assembled once at startup."""

from __future__ import annotations

from dataclasses import dataclass

from .chain import ChainConfig, get_chain_config
from .errors import MissingConfigurationError
from .storage import DatabaseConfig, get_database_config


@dataclass(frozen=True, slots=True)
class AppConfig:
    database: DatabaseConfig
    chain: ChainConfig | None = None


def get_app_config(*, require_chain: bool = True) -> AppConfig:
    """Build the application configuration from the environment.

    Every missing variable is reported in one error, so an operator can fix the
    environment in a single pass.
    """

    missing: list[str] = []
    database: DatabaseConfig | None = None
    chain: ChainConfig | None = None
    try:
        database = get_database_config()
    except MissingConfigurationError as exc:
        missing.append(str(exc))
    if require_chain:
        try:
            chain = get_chain_config()
        except MissingConfigurationError as exc:
            missing.append(str(exc))
    if missing or database is None:
        raise MissingConfigurationError("; ".join(missing))

    return AppConfig(database=database, chain=chain)
