"""SQL repository for the ``account`` table.

Implements AccountRepositoryPort with plain SQL over short SQLAlchemy
sessions, one statement per operation. The session marker lives in the
nullable ``refresh_token`` column; rotation uses a conditional UPDATE so
that two concurrent refreshes of the same token cannot both succeed.

The SQL sticks to what PostgreSQL and SQLite both accept, so the
repository can be exercised against an in-memory SQLite database.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from clipspace.foundation.domain.exceptions import (
    ConflictError,
    PersistenceError,
    PrincipalNotFoundError,
)
from clipspace.foundation.domain.principal import AccountRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Row
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, username, email, full_name, credential_hash, refresh_token,
    avatar_url, cover_image_url, created_at, updated_at
"""


class SqlAccountRepository:
    """Account persistence on a relational database.

    Args:
        session_factory: Callable returning a SQLAlchemy Session context manager.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    # -- Reads --

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        with _store_errors("get_by_id", account_id=str(account_id)):
            with self._session_factory() as session:
                row = session.execute(
                    text(f"SELECT {_COLUMNS} FROM account WHERE id = :id"),  # noqa: S608
                    {"id": str(account_id)},
                ).fetchone()
        return _to_record(row) if row is not None else None

    def find_by_identifier(self, identifier: str) -> AccountRecord | None:
        with _store_errors("find_by_identifier"):
            with self._session_factory() as session:
                row = session.execute(
                    text(
                        f"SELECT {_COLUMNS} FROM account "  # noqa: S608
                        "WHERE username = :identifier OR email = :identifier"
                    ),
                    {"identifier": identifier},
                ).fetchone()
        return _to_record(row) if row is not None else None

    def get_refresh_token(self, account_id: UUID) -> str | None:
        with _store_errors("get_refresh_token", account_id=str(account_id)):
            with self._session_factory() as session:
                row = session.execute(
                    text("SELECT refresh_token FROM account WHERE id = :id"),
                    {"id": str(account_id)},
                ).fetchone()
        if row is None or row[0] is None:
            return None
        return str(row[0])

    # -- Writes --

    def add(self, account: AccountRecord) -> None:
        """Insert a new account.

        Raises:
            ConflictError: If the username or email is already taken.
        """
        now = _now()
        params = {
            "id": str(account.id),
            "username": account.username,
            "email": account.email,
            "full_name": account.full_name,
            "credential_hash": account.credential_hash,
            "refresh_token": account.refresh_token,
            "avatar_url": account.avatar_url,
            "cover_image_url": account.cover_image_url,
            "created_at": (account.created_at or now).isoformat(),
            "updated_at": (account.updated_at or now).isoformat(),
        }
        with _store_errors("add", account_id=str(account.id)):
            with self._session_factory() as session:
                try:
                    session.execute(
                        text(f"""
                            INSERT INTO account ({_COLUMNS})
                            VALUES
                                (:id, :username, :email, :full_name, :credential_hash,
                                 :refresh_token, :avatar_url, :cover_image_url,
                                 :created_at, :updated_at)
                        """),  # noqa: S608
                        params,
                    )
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    raise ConflictError(
                        "Username or email already registered", account_id=str(account.id)
                    ) from None

    def delete(self, account_id: UUID) -> None:
        with _store_errors("delete", account_id=str(account_id)):
            with self._session_factory() as session:
                session.execute(text("DELETE FROM account WHERE id = :id"), {"id": str(account_id)})
                session.commit()

    def set_refresh_token(self, account_id: UUID, token: str) -> None:
        """Overwrite the session marker (last writer wins)."""
        updated = self._update(
            "set_refresh_token",
            "UPDATE account SET refresh_token = :token, updated_at = :now WHERE id = :id",
            {"id": str(account_id), "token": token},
        )
        if updated == 0:
            raise PrincipalNotFoundError(account_id)

    def compare_and_set_refresh_token(self, account_id: UUID, expected: str, token: str) -> bool:
        """Replace the session marker only if it still equals ``expected``."""
        updated = self._update(
            "compare_and_set_refresh_token",
            "UPDATE account SET refresh_token = :token, updated_at = :now "
            "WHERE id = :id AND refresh_token = :expected",
            {"id": str(account_id), "token": token, "expected": expected},
        )
        return updated == 1

    def clear_refresh_token(self, account_id: UUID) -> None:
        self._update(
            "clear_refresh_token",
            "UPDATE account SET refresh_token = NULL, updated_at = :now WHERE id = :id",
            {"id": str(account_id)},
        )

    def update_credential_hash(self, account_id: UUID, credential_hash: str) -> None:
        updated = self._update(
            "update_credential_hash",
            "UPDATE account SET credential_hash = :credential_hash, updated_at = :now "
            "WHERE id = :id",
            {"id": str(account_id), "credential_hash": credential_hash},
        )
        if updated == 0:
            raise PrincipalNotFoundError(account_id)

    def _update(self, operation: str, statement: str, params: dict[str, Any]) -> int:
        with _store_errors(operation, account_id=params["id"]):
            with self._session_factory() as session:
                result = session.execute(text(statement), {**params, "now": _now().isoformat()})
                session.commit()
                return int(result.rowcount)  # type: ignore[attr-defined]

    @classmethod
    def ensure_table_exists(cls, session_factory: Callable[[], Session]) -> None:
        """Create the account table if it does not exist."""
        with session_factory() as session:
            session.execute(
                text("""
                CREATE TABLE IF NOT EXISTS account (
                    id UUID PRIMARY KEY,
                    username VARCHAR(64) NOT NULL UNIQUE,
                    email VARCHAR(255) NOT NULL UNIQUE,
                    full_name VARCHAR(255) NOT NULL,
                    credential_hash VARCHAR(255) NOT NULL,
                    refresh_token TEXT,
                    avatar_url TEXT NOT NULL DEFAULT '',
                    cover_image_url TEXT NOT NULL DEFAULT '',
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL,
                    updated_at TIMESTAMP WITH TIME ZONE NOT NULL
                )
            """)
            )
            session.commit()


@contextmanager
def _store_errors(operation: str, **context: Any) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("account_store_failed", extra={"operation": operation, **context})
        raise PersistenceError(operation, **context) from exc


def _now() -> datetime:
    return datetime.now(UTC)


def _as_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _to_record(row: Row[Any]) -> AccountRecord:
    return AccountRecord(
        id=UUID(str(row[0])),
        username=str(row[1]),
        email=str(row[2]),
        full_name=str(row[3]),
        credential_hash=str(row[4]),
        refresh_token=str(row[5]) if row[5] is not None else None,
        avatar_url=str(row[6] or ""),
        cover_image_url=str(row[7] or ""),
        created_at=_as_datetime(row[8]),
        updated_at=_as_datetime(row[9]),
    )
