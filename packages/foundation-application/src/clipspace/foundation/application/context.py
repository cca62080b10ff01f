"""Principal context for request-scoped authentication state.

Provides a ContextVar-based mechanism for propagating the authenticated
principal across the call stack without explicit parameter passing. The
guard middleware sets it after a bearer token has been verified and the
account loaded; handlers and services read it back.

Usage:
    # In handlers/services
    from clipspace.foundation.application.context import get_current_principal

    principal = get_current_principal()  # Raises if no principal context
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contextvars import Token

    from clipspace.foundation.domain.principal import Principal


class NoRequestContextError(RuntimeError):
    """Raised when the principal is accessed outside an authenticated request."""

    def __init__(self) -> None:
        super().__init__(
            "No principal context available. "
            "Ensure this code is called within a request that passed the auth guard."
        )


_principal_context: ContextVar[Principal | None] = ContextVar("principal_context", default=None)


def set_principal_context(principal: Principal) -> Token[Principal | None]:
    """Set the authenticated principal for the current request.

    Called by the guard middleware after successful token verification and
    principal lookup. Returns a token for cleanup.

    Args:
        principal: Sanitized principal resolved from the access token.

    Returns:
        Token for resetting the context.
    """
    return _principal_context.set(principal)


def clear_principal_context(token: Token[Principal | None]) -> None:
    """Reset the principal context using the provided token.

    Called in middleware finally block after request completes.

    Args:
        token: Token from set_principal_context.
    """
    _principal_context.reset(token)


def get_current_principal() -> Principal:
    """Get the authenticated principal from request context.

    Returns:
        The authenticated Principal for the current request.

    Raises:
        NoRequestContextError: If called outside authenticated request.
    """
    principal = _principal_context.get()
    if principal is None:
        raise NoRequestContextError()
    return principal


def get_optional_principal() -> Principal | None:
    """Get the authenticated principal if available, or None.

    Unlike get_current_principal(), this does not raise on missing context.

    Returns:
        The authenticated Principal, or None if not in authenticated context.
    """
    return _principal_context.get()
