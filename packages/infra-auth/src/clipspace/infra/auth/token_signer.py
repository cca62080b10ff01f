"""HS256 access and refresh token signing with PyJWT.

Access and refresh tokens are signed with separate secrets and lifetimes
and are told apart by a ``typ`` claim, so one can never stand in for the
other. Verification pins the algorithm list to the configured algorithm.

Claims:
    access:  sub, typ="access", email, username, full_name, iat, exp, jti, iss
    refresh: sub, typ="refresh", iat, exp, jti, iss

Expiry is checked against an injectable clock rather than PyJWT's own
``time.time()`` call, so lifetimes can be tested without sleeping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import jwt as pyjwt

from clipspace.foundation.domain.exceptions import InvalidTokenError
from clipspace.foundation.domain.tokens import TokenClaims, TokenPurpose

if TYPE_CHECKING:
    from collections.abc import Callable

    from clipspace.foundation.domain.principal import AccountRecord

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["sub", "exp", "iat", "typ", "iss"]
_PROFILE_CLAIMS = ("email", "username", "full_name")


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class TokenSignerConfig:
    """Immutable signing configuration, built once from AuthSettings.

    Attributes:
        access_secret: HMAC secret for access tokens.
        refresh_secret: HMAC secret for refresh tokens.
        access_ttl: Access token lifetime.
        refresh_ttl: Refresh token lifetime.
        algorithm: JWS algorithm; the only one accepted on verification.
        issuer: Value of the 'iss' claim, checked on verification.
        leeway: Clock skew tolerated when checking 'exp'.
    """

    access_secret: str = field(repr=False)
    refresh_secret: str = field(repr=False)
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=10)
    algorithm: str = "HS256"
    issuer: str = "clipspace"
    leeway: timedelta = timedelta(0)


class TokenSigner:
    """Mints and verifies session tokens.

    Implements the TokenSignerPort protocol.

    Args:
        config: Secrets, lifetimes, algorithm and issuer.
        clock: Returns the current aware UTC time. Defaults to the wall clock.
    """

    def __init__(
        self,
        config: TokenSignerConfig,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._clock = clock

    def sign_access_token(self, account: AccountRecord) -> str:
        """Mint an access token carrying the account's profile claims."""
        return self._sign(
            str(account.id),
            TokenPurpose.ACCESS,
            {
                "email": account.email,
                "username": account.username,
                "full_name": account.full_name,
            },
        )

    def sign_refresh_token(self, subject: str) -> str:
        """Mint a refresh token carrying only the subject."""
        return self._sign(subject, TokenPurpose.REFRESH, {})

    def verify_access_token(self, token: str) -> TokenClaims:
        return self.verify(token, TokenPurpose.ACCESS)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self.verify(token, TokenPurpose.REFRESH)

    def verify(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        """Verify a token against the secret of ``purpose``.

        Args:
            token: Encoded JWT.
            purpose: Expected token purpose.

        Returns:
            Verified claims.

        Raises:
            InvalidTokenError: On any failure; ``reason`` names the cause.
        """
        if not token:
            raise InvalidTokenError("missing")

        try:
            header = pyjwt.get_unverified_header(token)
        except pyjwt.InvalidTokenError:
            raise InvalidTokenError("malformed") from None
        if header.get("alg") != self._config.algorithm:
            raise InvalidTokenError("algorithm_mismatch")

        try:
            claims = pyjwt.decode(
                token,
                self._secret_for(purpose),
                algorithms=[self._config.algorithm],
                issuer=self._config.issuer,
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except pyjwt.InvalidAlgorithmError:
            raise InvalidTokenError("algorithm_mismatch") from None
        except pyjwt.InvalidSignatureError:
            raise InvalidTokenError("bad_signature") from None
        except pyjwt.MissingRequiredClaimError:
            raise InvalidTokenError("missing_claim") from None
        except pyjwt.DecodeError:
            raise InvalidTokenError("malformed") from None
        except pyjwt.InvalidTokenError:
            raise InvalidTokenError("invalid_claims") from None

        return self._check_claims(claims, purpose)

    def _sign(self, subject: str, purpose: TokenPurpose, extra: dict[str, Any]) -> str:
        now = self._clock()
        ttl = self._ttl_for(purpose)
        payload: dict[str, Any] = {
            "sub": subject,
            "typ": purpose.value,
            **extra,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid4().hex,
            "iss": self._config.issuer,
        }
        return pyjwt.encode(payload, self._secret_for(purpose), algorithm=self._config.algorithm)

    def _check_claims(self, claims: dict[str, Any], purpose: TokenPurpose) -> TokenClaims:
        if claims.get("typ") != purpose.value:
            raise InvalidTokenError("wrong_purpose")

        subject = claims.get("sub")
        issued = claims.get("iat")
        expires = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("invalid_claims")
        if not isinstance(issued, int | float) or not isinstance(expires, int | float):
            raise InvalidTokenError("invalid_claims")

        now = self._clock().timestamp()
        if now >= expires + self._config.leeway.total_seconds():
            raise InvalidTokenError("expired")

        extra = (
            {name: claims[name] for name in _PROFILE_CLAIMS if name in claims}
            if purpose is TokenPurpose.ACCESS
            else {}
        )
        return TokenClaims(
            subject=subject,
            purpose=purpose,
            issued_at=datetime.fromtimestamp(issued, tz=UTC),
            expires_at=datetime.fromtimestamp(expires, tz=UTC),
            token_id=str(claims.get("jti", "")),
            extra=extra,
        )

    def _secret_for(self, purpose: TokenPurpose) -> str:
        if purpose is TokenPurpose.ACCESS:
            return self._config.access_secret
        return self._config.refresh_secret

    def _ttl_for(self, purpose: TokenPurpose) -> timedelta:
        if purpose is TokenPurpose.ACCESS:
            return self._config.access_ttl
        return self._config.refresh_ttl
