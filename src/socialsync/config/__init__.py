"""Application configuration helpers."""

from __future__ import annotations

from .chain import (
    BASE_MAINNET_CHAIN_ID,
    BASE_SEPOLIA_CHAIN_ID,
    ChainConfig,
    get_chain_config,
)
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .logging import configure_logging
from .settings import AppConfig, get_app_config
from .storage import DatabaseConfig, get_database_config, normalize_database_uri

__all__ = [
    "BASE_MAINNET_CHAIN_ID",
    "BASE_SEPOLIA_CHAIN_ID",
    "AppConfig",
    "ChainConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "configure_logging",
    "get_app_config",
    "get_chain_config",
    "get_database_config",
    "normalize_database_uri",
    "optional_env_var",
    "require_env_vars",
]
