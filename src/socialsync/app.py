"""Application orchestration entry points.

Each command resolves configuration from the environment only for the adapters
it actually builds, so tests can inject fakes without setting variables.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from socialsync.adapters.chain import ChainSocialReader
from socialsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCardUnitOfWork,
    is_started,
    startup,
)
from socialsync.config import ConfigurationError, get_app_config
from socialsync.domain.gate import RunMode
from socialsync.domain.migration import MigrationResult, migrate_socials
from socialsync.domain.ports.unit_of_work import CardUnitOfWork
from socialsync.domain.reconciliation import (
    SyncResult,
    VerificationReport,
    sync_socials_from_chain,
    verify_socials,
)

if TYPE_CHECKING:
    from socialsync.config import AppConfig
    from socialsync.domain.ports.chain import SocialAttestationReader

UnitOfWorkFactory = Callable[[], CardUnitOfWork]

log = getLogger(__name__)


@dataclass(slots=True)
class _ConfigSource:
    config: AppConfig | None
    require_chain: bool = True

    def get(self) -> AppConfig:
        if self.config is None:
            self.config = get_app_config(require_chain=self.require_chain)
        return self.config


def _store(
    source: _ConfigSource,
    unit_of_work_factory: UnitOfWorkFactory | None,
) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        database = source.get().database
        log.info("Connecting to %s", database.masked_uri())
        startup(database_uri=database.uri)
    return SqlAlchemyCardUnitOfWork


@contextmanager
def _chain_reader(
    source: _ConfigSource,
    reader: SocialAttestationReader | None,
) -> Iterator[SocialAttestationReader]:
    if reader is not None:
        yield reader
        return
    chain = source.get().chain
    if chain is None:
        raise ConfigurationError("Chain configuration is required for this command")
    with ChainSocialReader(chain) as chain_reader:
        yield chain_reader


def migrate_legacy_socials(
    *,
    mode: RunMode = RunMode.DRY_RUN,
    config: AppConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MigrationResult:
    """Migrate legacy socials documents in the configured store."""

    source = _ConfigSource(config, require_chain=False)
    effective_uow = _store(source, unit_of_work_factory)
    log.info("Starting socials migration (%s)", mode)
    return migrate_socials(unit_of_work_factory=effective_uow, mode=mode)


def sync_socials(
    *,
    mode: RunMode = RunMode.DRY_RUN,
    config: AppConfig | None = None,
    reader: SocialAttestationReader | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncResult:
    """Align stored socials with their on-chain attestations."""

    source = _ConfigSource(config)
    effective_uow = _store(source, unit_of_work_factory)
    log.info("Starting chain sync (%s)", mode)
    with _chain_reader(source, reader) as effective_reader:
        return sync_socials_from_chain(
            unit_of_work_factory=effective_uow,
            reader=effective_reader,
            mode=mode,
        )


def verify_onchain_socials(
    *,
    config: AppConfig | None = None,
    reader: SocialAttestationReader | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> VerificationReport:
    """Report how far stored socials agree with the chain. Never writes."""

    source = _ConfigSource(config)
    effective_uow = _store(source, unit_of_work_factory)
    log.info("Starting socials verification")
    with _chain_reader(source, reader) as effective_reader:
        return verify_socials(unit_of_work_factory=effective_uow, reader=effective_reader)
