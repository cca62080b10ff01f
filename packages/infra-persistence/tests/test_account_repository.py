"""Tests for SqlAccountRepository against in-memory SQLite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clipspace.foundation.domain.exceptions import (
    ConflictError,
    PersistenceError,
    PrincipalNotFoundError,
)
from clipspace.foundation.domain.ports import AccountRepositoryPort
from clipspace.foundation.domain.principal import AccountRecord
from clipspace.infra.persistence.account_repository import SqlAccountRepository

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def _record(username: str = "alice", email: str = "alice@example.com") -> AccountRecord:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    return AccountRecord(
        id=uuid4(),
        username=username,
        email=email,
        full_name="Alice Liddell",
        credential_hash="$2b$12$hash",
        avatar_url="https://cdn.example.com/a.png",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture()
def repo(session_factory: sessionmaker[Session]) -> SqlAccountRepository:
    return SqlAccountRepository(session_factory)


@pytest.mark.unit
class TestReads:
    def test_conforms_to_port(self, repo: SqlAccountRepository) -> None:
        assert isinstance(repo, AccountRepositoryPort)

    def test_add_then_get_by_id(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        loaded = repo.get_by_id(record.id)
        assert loaded is not None
        assert loaded.id == record.id
        assert loaded.username == "alice"
        assert loaded.credential_hash == "$2b$12$hash"
        assert loaded.refresh_token is None
        assert loaded.created_at == record.created_at

    def test_get_missing_returns_none(self, repo: SqlAccountRepository) -> None:
        assert repo.get_by_id(uuid4()) is None

    def test_find_by_username_or_email(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        assert repo.find_by_identifier("alice").id == record.id  # type: ignore[union-attr]
        assert repo.find_by_identifier("alice@example.com").id == record.id  # type: ignore[union-attr]
        assert repo.find_by_identifier("bob") is None


@pytest.mark.unit
class TestWrites:
    def test_duplicate_username_conflicts(self, repo: SqlAccountRepository) -> None:
        repo.add(_record())
        with pytest.raises(ConflictError):
            repo.add(_record(email="other@example.com"))

    def test_duplicate_email_conflicts(self, repo: SqlAccountRepository) -> None:
        repo.add(_record())
        with pytest.raises(ConflictError):
            repo.add(_record(username="other"))

    def test_set_and_clear_refresh_token(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        repo.set_refresh_token(record.id, "r1")
        assert repo.get_refresh_token(record.id) == "r1"
        repo.set_refresh_token(record.id, "r2")
        assert repo.get_refresh_token(record.id) == "r2"
        repo.clear_refresh_token(record.id)
        repo.clear_refresh_token(record.id)
        assert repo.get_refresh_token(record.id) is None

    def test_set_refresh_token_missing_row(self, repo: SqlAccountRepository) -> None:
        with pytest.raises(PrincipalNotFoundError):
            repo.set_refresh_token(uuid4(), "r1")

    def test_compare_and_set(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        repo.set_refresh_token(record.id, "r1")

        assert repo.compare_and_set_refresh_token(record.id, "r1", "r2") is True
        assert repo.compare_and_set_refresh_token(record.id, "r1", "r3") is False
        assert repo.get_refresh_token(record.id) == "r2"

    def test_compare_and_set_when_logged_out(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        assert repo.compare_and_set_refresh_token(record.id, "r1", "r2") is False
        assert repo.get_refresh_token(record.id) is None

    def test_update_credential_hash(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        repo.update_credential_hash(record.id, "$2b$12$other")
        assert repo.get_by_id(record.id).credential_hash == "$2b$12$other"  # type: ignore[union-attr]

    def test_update_credential_hash_missing_row(self, repo: SqlAccountRepository) -> None:
        with pytest.raises(PrincipalNotFoundError):
            repo.update_credential_hash(uuid4(), "$2b$12$other")

    def test_delete(self, repo: SqlAccountRepository) -> None:
        record = _record()
        repo.add(record)
        repo.delete(record.id)
        repo.delete(record.id)
        assert repo.get_by_id(record.id) is None


@pytest.mark.unit
class TestStoreFailures:
    def test_missing_table_raises_persistence_error(self) -> None:
        engine = create_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
        repo = SqlAccountRepository(sessionmaker(engine))
        try:
            with pytest.raises(PersistenceError) as exc_info:
                repo.get_refresh_token(uuid4())
            assert exc_info.value.operation == "get_refresh_token"
        finally:
            engine.dispose()

    def test_ensure_table_exists_is_idempotent(
        self, session_factory: sessionmaker[Session]
    ) -> None:
        SqlAccountRepository.ensure_table_exists(session_factory)
