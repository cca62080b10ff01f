"""Port interface for the per-account refresh token store.

The store holds at most one refresh token per account. Keeping it behind this
narrow interface means multi-session support (a set of tokens keyed by
device) would only change the adapter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID


@runtime_checkable
class SessionStorePort(Protocol):
    """Port for reading and writing the stored refresh token."""

    def get(self, principal_id: UUID) -> str | None:
        """Return the stored refresh token, or None when logged out."""
        ...

    def set(self, principal_id: UUID, token: str) -> None:
        """Overwrite the stored refresh token (last writer wins).

        Raises:
            PersistenceError: If the write fails.
        """
        ...

    def compare_and_set(self, principal_id: UUID, expected: str, token: str) -> bool:
        """Replace the stored token only if it still equals ``expected``.

        Returns:
            True if the write happened, False if the stored value had changed.

        Raises:
            PersistenceError: If the write fails.
        """
        ...

    def clear(self, principal_id: UUID) -> None:
        """Remove the stored token. Clearing an absent token is not an error.

        Raises:
            PersistenceError: If the write fails.
        """
        ...
