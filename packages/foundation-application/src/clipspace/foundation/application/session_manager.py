"""Session life-cycle: login, refresh (rotation), logout and credential change.

Each account has at most one session, represented by the single refresh token
held in the session store:

    LOGGED_OUT --login--> ACTIVE --refresh--> ACTIVE (new token)
    ACTIVE --logout / token expiry / mismatch--> LOGGED_OUT

Security invariants:
    - The store is written only after every verification step passed and
      both new tokens were minted.
    - A refresh token is accepted only if it verifies against the refresh
      secret AND equals the stored value; rotation replaces the stored value
      with a conditional write, so a replayed or concurrently reused token
      loses.
    - Plaintext passwords and token values are never logged.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from clipspace.foundation.domain.account_value_objects import normalize_identifier
from clipspace.foundation.domain.exceptions import (
    InvalidCredentialError,
    InvalidTokenError,
    PrincipalNotFoundError,
    StaleTokenError,
    ValidationError,
)
from clipspace.foundation.domain.tokens import SessionState, TokenPair, TokenPurpose

if TYPE_CHECKING:
    from clipspace.foundation.domain.ports import (
        AccountRepositoryPort,
        CredentialHasherPort,
        SessionStorePort,
        TokenSignerPort,
    )
    from clipspace.foundation.domain.principal import AccountRecord, Principal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionGrant:
    """Result of a successful login or refresh.

    Attributes:
        principal: Sanitized view of the account the session belongs to.
        tokens: Freshly minted access/refresh pair (sensitive, repr redacted).
    """

    principal: Principal
    tokens: TokenPair

    @property
    def access_token(self) -> str:
        return self.tokens.access_token

    @property
    def refresh_token(self) -> str:
        return self.tokens.refresh_token


class SessionManager:
    """Orchestrates the session state machine over the auth ports.

    Args:
        accounts: Account lookups and credential hash storage.
        hasher: Password hashing (CredentialVault).
        signer: Token minting and verification (TokenSigner).
        sessions: Stored refresh token per account (SessionStore).
    """

    def __init__(
        self,
        accounts: AccountRepositoryPort,
        hasher: CredentialHasherPort,
        signer: TokenSignerPort,
        sessions: SessionStorePort,
    ) -> None:
        self._accounts = accounts
        self._hasher = hasher
        self._signer = signer
        self._sessions = sessions

    def login(self, identifier: str, password: str) -> SessionGrant:
        """Authenticate by username or email and open a session.

        Args:
            identifier: Username or email, matched case-insensitively.
            password: Plaintext password.

        Returns:
            SessionGrant with the principal and a new token pair.

        Raises:
            ValidationError: If identifier or password is blank.
            PrincipalNotFoundError: If no account matches the identifier.
            InvalidCredentialError: If the password is wrong.
            HashingFailureError: If the stored hash cannot be checked.
            PersistenceError: If the store read or write fails.
        """
        lookup = normalize_identifier(identifier or "")
        if not lookup:
            raise ValidationError("identifier", "Username or email is required")
        if not password:
            raise ValidationError("password", "Password is required")

        account = self._accounts.find_by_identifier(lookup)
        if account is None:
            logger.info("login_rejected", extra={"reason": "unknown_identifier"})
            raise PrincipalNotFoundError(lookup)

        if not self._hasher.verify(password, account.credential_hash):
            logger.info(
                "login_rejected",
                extra={"reason": "invalid_credential", "account_id": str(account.id)},
            )
            raise InvalidCredentialError()

        tokens = self._mint(account)
        self._sessions.set(account.id, tokens.refresh_token)

        logger.info("login_succeeded", extra={"account_id": str(account.id)})
        return SessionGrant(principal=account.to_principal(), tokens=tokens)

    def refresh(self, presented_refresh_token: str | None) -> SessionGrant:
        """Exchange the current refresh token for a new pair (rotation).

        Args:
            presented_refresh_token: Refresh token sent by the client.

        Returns:
            SessionGrant with a new token pair. The presented token is no
            longer usable afterwards.

        Raises:
            InvalidTokenError: If the token is missing, malformed, forged,
                expired or not a refresh token.
            PrincipalNotFoundError: If the account no longer exists.
            StaleTokenError: If the token is not the stored one (already
                rotated, logged out, or lost a concurrent refresh).
            PersistenceError: If the store read or write fails.
        """
        if not presented_refresh_token or not presented_refresh_token.strip():
            logger.info("refresh_rejected", extra={"reason": "missing"})
            raise InvalidTokenError("missing")

        try:
            claims = self._signer.verify(presented_refresh_token, TokenPurpose.REFRESH)
            account_id = _subject_to_id(claims.subject)
        except InvalidTokenError as exc:
            logger.info("refresh_rejected", extra={"reason": exc.reason})
            raise

        account = self._accounts.get_by_id(account_id)
        if account is None:
            logger.info(
                "refresh_rejected",
                extra={"reason": "principal_missing", "account_id": str(account_id)},
            )
            raise PrincipalNotFoundError(account_id)

        stored = self._sessions.get(account.id)
        if stored is None or not _tokens_equal(stored, presented_refresh_token):
            logger.warning(
                "refresh_rejected",
                extra={
                    "reason": "stale" if stored is not None else "logged_out",
                    "account_id": str(account.id),
                },
            )
            raise StaleTokenError()

        tokens = self._mint(account)
        if not self._sessions.compare_and_set(
            account.id, presented_refresh_token, tokens.refresh_token
        ):
            logger.warning(
                "refresh_rejected",
                extra={"reason": "concurrent_rotation", "account_id": str(account.id)},
            )
            raise StaleTokenError()

        logger.info("refresh_succeeded", extra={"account_id": str(account.id)})
        return SessionGrant(principal=account.to_principal(), tokens=tokens)

    def logout(self, principal_id: UUID) -> None:
        """Close the session. Logging out twice is not an error.

        The caller is responsible for discarding any tokens it still holds;
        an already-issued access token stays valid until it expires.

        Raises:
            PersistenceError: If the store write fails.
        """
        self._sessions.clear(principal_id)
        logger.info("logout_succeeded", extra={"account_id": str(principal_id)})

    def change_credential(
        self,
        principal_id: UUID,
        old_password: str,
        new_password: str,
    ) -> None:
        """Replace the password after checking the current one.

        The current session is left untouched; call :meth:`logout` as well
        to force re-authentication.

        Raises:
            PrincipalNotFoundError: If the account no longer exists.
            ValidationError: If the new password is empty or unchanged.
            InvalidCredentialError: If ``old_password`` is wrong.
            HashingFailureError: If hashing fails.
            PersistenceError: If the store write fails.
        """
        if not new_password:
            raise ValidationError("new_password", "New password is required")

        account = self._accounts.get_by_id(principal_id)
        if account is None:
            raise PrincipalNotFoundError(principal_id)

        if not self._hasher.verify(old_password or "", account.credential_hash):
            logger.info(
                "credential_change_rejected",
                extra={"reason": "invalid_credential", "account_id": str(principal_id)},
            )
            raise InvalidCredentialError()

        if old_password == new_password:
            raise ValidationError("new_password", "New password must differ from the current one")

        self._accounts.update_credential_hash(principal_id, self._hasher.hash(new_password))
        logger.info("credential_changed", extra={"account_id": str(principal_id)})

    def session_state(self, principal_id: UUID) -> SessionState:
        """Report whether the account holds a live session.

        A stored refresh token that no longer verifies (expired) counts as
        logged out.
        """
        stored = self._sessions.get(principal_id)
        if stored is None:
            return SessionState.LOGGED_OUT
        try:
            self._signer.verify(stored, TokenPurpose.REFRESH)
        except InvalidTokenError:
            return SessionState.LOGGED_OUT
        return SessionState.ACTIVE

    def _mint(self, account: AccountRecord) -> TokenPair:
        return TokenPair(
            access_token=self._signer.sign_access_token(account),
            refresh_token=self._signer.sign_refresh_token(str(account.id)),
        )


def _subject_to_id(subject: str) -> UUID:
    try:
        return UUID(subject)
    except (TypeError, ValueError):
        raise InvalidTokenError("invalid_claims") from None


def _tokens_equal(stored: str, presented: str) -> bool:
    return hmac.compare_digest(stored.encode("utf-8"), presented.encode("utf-8"))
