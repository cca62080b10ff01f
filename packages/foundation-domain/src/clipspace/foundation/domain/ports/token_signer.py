"""Port interface for signing and verifying session tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from clipspace.foundation.domain.principal import AccountRecord
    from clipspace.foundation.domain.tokens import TokenClaims, TokenPurpose


@runtime_checkable
class TokenSignerPort(Protocol):
    """Port for minting and verifying access and refresh tokens.

    Implementations own the secrets and lifetimes; callers only choose the
    purpose.
    """

    def sign_access_token(self, account: AccountRecord) -> str:
        """Mint a short-lived access token carrying profile claims."""
        ...

    def sign_refresh_token(self, subject: str) -> str:
        """Mint a long-lived refresh token carrying only the subject."""
        ...

    def verify(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        """Verify signature, expiry and purpose of a token.

        Raises:
            InvalidTokenError: On any verification failure.
        """
        ...
