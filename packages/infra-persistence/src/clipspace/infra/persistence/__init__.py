"""Clipspace Infra Persistence -- database manager and account repositories."""

from clipspace.infra.persistence.account_repository import SqlAccountRepository
from clipspace.infra.persistence.database import (
    DatabaseManager,
    DatabaseSettings,
    get_database_manager,
)
from clipspace.infra.persistence.lifespan import lifespan_contribution
from clipspace.infra.persistence.memory_account_repository import InMemoryAccountRepository

__all__ = [
    "DatabaseManager",
    "DatabaseSettings",
    "InMemoryAccountRepository",
    "SqlAccountRepository",
    "get_database_manager",
    "lifespan_contribution",
]
