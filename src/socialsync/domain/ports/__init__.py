"""Domain port definitions for adapters."""

from __future__ import annotations

from .chain import (
    ChainRead,
    ChainReadFailure,
    ChainValue,
    SocialAttestationReader,
)
from .persistence import CardRepository, Repository
from .unit_of_work import (
    CardRepositories,
    CardUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CardRepositories",
    "CardRepository",
    "CardUnitOfWork",
    "ChainRead",
    "ChainReadFailure",
    "ChainValue",
    "Repository",
    "RepositoryCollection",
    "SocialAttestationReader",
    "UnitOfWork",
]
