"""Request-time authentication guard.

Resolves the bearer access token of a request to a sanitized Principal.
The token is read from the ``accessToken`` cookie first and from the
``Authorization: Bearer`` header second. Every failure is reported as
:class:`UnauthorizedError`; the specific cause only reaches the log.

The guard never touches the session store: an access token stays valid
until it expires, even after logout.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from clipspace.foundation.domain.exceptions import InvalidTokenError, UnauthorizedError
from clipspace.foundation.domain.tokens import TokenPurpose

if TYPE_CHECKING:
    from clipspace.foundation.domain.ports import AccountRepositoryPort, TokenSignerPort
    from clipspace.foundation.domain.principal import Principal

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

_BEARER_SCHEME = "bearer"


def extract_token(cookie_value: str | None, authorization_header: str | None) -> str | None:
    """Pick the access token from the cookie or the Authorization header.

    Args:
        cookie_value: Value of the ``accessToken`` cookie, if any.
        authorization_header: Raw ``Authorization`` header, if any.

    Returns:
        The token, or None if neither source carries one.

    Example:
        >>> extract_token(None, "Bearer abc.def.ghi")
        'abc.def.ghi'
        >>> extract_token("cookie-token", "Bearer header-token")
        'cookie-token'
        >>> extract_token(None, "Basic dXNlcg==") is None
        True
    """
    if cookie_value and cookie_value.strip():
        return cookie_value.strip()

    if not authorization_header:
        return None
    scheme, _, credentials = authorization_header.strip().partition(" ")
    if scheme.lower() != _BEARER_SCHEME:
        return None
    return credentials.strip() or None


class AuthGuard:
    """Verifies access tokens and loads the principal they name.

    Args:
        signer: Token verification (TokenSigner).
        accounts: Account lookups, to confirm the principal still exists.
    """

    def __init__(self, signer: TokenSignerPort, accounts: AccountRepositoryPort) -> None:
        self._signer = signer
        self._accounts = accounts

    def authenticate(
        self,
        cookie_value: str | None,
        authorization_header: str | None,
    ) -> Principal:
        """Authenticate a request from its cookie and Authorization header.

        Returns:
            Sanitized principal (no credential hash, no refresh token).

        Raises:
            UnauthorizedError: If the token is missing or invalid, or the
                principal no longer exists.
            PersistenceError: If the account lookup fails.
        """
        token = extract_token(cookie_value, authorization_header)
        if token is None:
            raise self._reject("missing_token")

        try:
            claims = self._signer.verify(token, TokenPurpose.ACCESS)
        except InvalidTokenError as exc:
            raise self._reject(exc.reason) from None

        try:
            account_id = UUID(claims.subject)
        except ValueError:
            raise self._reject("invalid_claims") from None

        account = self._accounts.get_by_id(account_id)
        if account is None:
            raise self._reject("principal_missing", account_id=str(account_id))

        return account.to_principal()

    @staticmethod
    def _reject(reason: str, **context: str) -> UnauthorizedError:
        logger.info("auth_guard_rejected", extra={"reason": reason, **context})
        return UnauthorizedError(reason)
