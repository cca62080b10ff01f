"""In-process account repository.

Implements AccountRepositoryPort over a dict guarded by a lock. Used by the
example application and by tests that do not need a database. Records are
immutable, so updates swap in a replaced copy.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from clipspace.foundation.domain.exceptions import ConflictError, PrincipalNotFoundError

if TYPE_CHECKING:
    from uuid import UUID

    from clipspace.foundation.domain.principal import AccountRecord


class InMemoryAccountRepository:
    """Thread-safe dict-backed account store."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: dict[UUID, AccountRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        with self._lock:
            return self._rows.get(account_id)

    def find_by_identifier(self, identifier: str) -> AccountRecord | None:
        with self._lock:
            for row in self._rows.values():
                if identifier in (row.username, row.email):
                    return row
        return None

    def add(self, account: AccountRecord) -> None:
        with self._lock:
            for row in self._rows.values():
                if row.id == account.id or row.username == account.username or (
                    row.email == account.email
                ):
                    raise ConflictError(
                        "Username or email already registered", account_id=str(account.id)
                    )
            self._rows[account.id] = account

    def delete(self, account_id: UUID) -> None:
        with self._lock:
            self._rows.pop(account_id, None)

    def get_refresh_token(self, account_id: UUID) -> str | None:
        with self._lock:
            row = self._rows.get(account_id)
            return row.refresh_token if row is not None else None

    def set_refresh_token(self, account_id: UUID, token: str) -> None:
        with self._lock:
            self._replace(account_id, refresh_token=token)

    def compare_and_set_refresh_token(self, account_id: UUID, expected: str, token: str) -> bool:
        with self._lock:
            row = self._rows.get(account_id)
            if row is None or row.refresh_token != expected:
                return False
            self._replace(account_id, refresh_token=token)
            return True

    def clear_refresh_token(self, account_id: UUID) -> None:
        with self._lock:
            if account_id in self._rows:
                self._replace(account_id, refresh_token=None)

    def update_credential_hash(self, account_id: UUID, credential_hash: str) -> None:
        with self._lock:
            self._replace(account_id, credential_hash=credential_hash)

    def _replace(self, account_id: UUID, **changes: object) -> None:
        row = self._rows.get(account_id)
        if row is None:
            raise PrincipalNotFoundError(account_id)
        self._rows[account_id] = replace(row, updated_at=datetime.now(UTC), **changes)  # type: ignore[arg-type]
