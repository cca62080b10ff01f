"""Shared fixtures for infra-persistence tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from clipspace.infra.persistence.account_repository import SqlAccountRepository

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker[Session]]:
    """Session factory over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    factory = sessionmaker(engine, expire_on_commit=False, autoflush=False)
    SqlAccountRepository.ensure_table_exists(factory)
    yield factory
    engine.dispose()
