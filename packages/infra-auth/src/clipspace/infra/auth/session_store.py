"""Refresh-token session store over the account repository.

Implements SessionStorePort. The stored value lives in the account row's
``refresh_token`` column; nothing is cached in process, so every read sees
the latest write from any worker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from clipspace.foundation.domain.ports import AccountRepositoryPort


class AccountSessionStore:
    """Session store backed by the ``refresh_token`` column.

    Args:
        accounts: The account repository holding the column.
    """

    def __init__(self, accounts: AccountRepositoryPort) -> None:
        self._accounts = accounts

    def get(self, principal_id: UUID) -> str | None:
        return self._accounts.get_refresh_token(principal_id)

    def set(self, principal_id: UUID, token: str) -> None:
        self._accounts.set_refresh_token(principal_id, token)

    def compare_and_set(self, principal_id: UUID, expected: str, token: str) -> bool:
        return self._accounts.compare_and_set_refresh_token(principal_id, expected, token)

    def clear(self, principal_id: UUID) -> None:
        self._accounts.clear_refresh_token(principal_id)
