"""Data storage configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .env import require_env_vars
from .errors import ConfigurationError

DATABASE_URL_ENV: Final[str] = "DATABASE_URL"

# libpq-style schemes as handed out by hosting providers; SQLAlchemy wants a driver name
_LIBPQ_DRIVERNAMES: Final[frozenset[str]] = frozenset({"postgres", "postgresql"})
_POSTGRES_DRIVERNAME: Final[str] = "postgresql+psycopg"


def _parse_url(uri: str) -> URL:
    try:
        return make_url(uri)
    except ArgumentError as exc:
        raise ConfigurationError(f"{DATABASE_URL_ENV} is not a valid database URL") from exc


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    def masked_uri(self) -> str:
        """Return the URI with any password replaced, for logging."""

        return _parse_url(self.uri).render_as_string(hide_password=True)


def normalize_database_uri(uri: str) -> str:
    url = _parse_url(uri)
    if url.drivername not in _LIBPQ_DRIVERNAMES:
        return uri
    return url.set(drivername=_POSTGRES_DRIVERNAME).render_as_string(hide_password=False)


def get_database_config() -> DatabaseConfig:
    values = require_env_vars((DATABASE_URL_ENV,))
    return DatabaseConfig(uri=normalize_database_uri(values[DATABASE_URL_ENV]))
