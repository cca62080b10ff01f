"""Port interface for account storage.

The account repository is owned by the wider service; the auth core only
needs lookups, the refresh token column and the credential hash column.
Every method raises ``PersistenceError`` when the underlying store fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from clipspace.foundation.domain.principal import AccountRecord


@runtime_checkable
class AccountRepositoryPort(Protocol):
    """Port for account persistence used by the auth core."""

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        """Load an account by id, or None if it does not exist."""
        ...

    def find_by_identifier(self, identifier: str) -> AccountRecord | None:
        """Load an account whose username or email equals ``identifier``.

        ``identifier`` is already normalised (trimmed, lowercased).
        """
        ...

    def add(self, account: AccountRecord) -> None:
        """Insert a new account.

        Raises:
            ConflictError: If the username or email is already taken.
        """
        ...

    def delete(self, account_id: UUID) -> None:
        """Remove an account. Deleting a missing account is not an error."""
        ...

    def get_refresh_token(self, account_id: UUID) -> str | None:
        """Read the stored refresh token column."""
        ...

    def set_refresh_token(self, account_id: UUID, token: str) -> None:
        """Overwrite the stored refresh token column.

        Raises:
            PrincipalNotFoundError: If the account row does not exist.
        """
        ...

    def compare_and_set_refresh_token(
        self,
        account_id: UUID,
        expected: str,
        token: str,
    ) -> bool:
        """Atomically replace the refresh token if it still equals ``expected``."""
        ...

    def clear_refresh_token(self, account_id: UUID) -> None:
        """Null the stored refresh token column (idempotent)."""
        ...

    def update_credential_hash(self, account_id: UUID, credential_hash: str) -> None:
        """Overwrite the stored credential hash.

        Raises:
            PrincipalNotFoundError: If the account row does not exist.
        """
        ...
