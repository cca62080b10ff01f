"""Token and session value objects.

``TokenClaims`` is the verified content of a signed token and is never
persisted. ``TokenPair`` is the result of login and refresh; both values are
bearer credentials, so its repr is redacted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime


class TokenPurpose(StrEnum):
    """Which secret and lifetime a token was minted with."""

    ACCESS = "access"
    REFRESH = "refresh"


class SessionState(StrEnum):
    """Session state of a single account."""

    LOGGED_OUT = "logged_out"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Verified claims of an access or refresh token.

    Attributes:
        subject: Account id from the 'sub' claim.
        purpose: Access or refresh.
        issued_at: 'iat' claim.
        expires_at: 'exp' claim.
        token_id: 'jti' claim.
        extra: Profile claims (email, username, full_name); empty for refresh tokens.
    """

    subject: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime
    token_id: str = ""
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Access and refresh token handed back to the transport layer.

    Both values are sensitive: the transport must deliver them as
    HTTP-only, script-unreadable cookies (or equivalent secure storage).
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
