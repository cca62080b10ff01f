"""Account record and the sanitized Principal view derived from it.

Pure domain objects with no external dependencies. ``AccountRecord`` is what
the repository stores; ``Principal`` is what leaves the auth core. The
credential hash and the refresh token exist only on the record and are hidden
from its repr.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated account attached to a request.

    Immutable for thread safety and to prevent modification after the guard
    resolved it. Carries no secret material.

    Attributes:
        id: Account identifier (also the JWT 'sub' claim).
        username: Normalised username.
        email: Normalised email.
        full_name: Display name.
        avatar_url: Avatar media URL.
        cover_image_url: Cover image media URL, empty if unset.
    """

    id: UUID
    username: str
    email: str
    full_name: str
    avatar_url: str = ""
    cover_image_url: str = ""

    @property
    def subject(self) -> str:
        """String form of the id, as carried in token claims."""
        return str(self.id)


@dataclass(frozen=True, slots=True)
class AccountRecord:
    """Persisted account row as seen by the auth core.

    Attributes:
        id: Unique, immutable account identifier.
        username: Normalised username (unique).
        email: Normalised email (unique).
        full_name: Display name.
        credential_hash: bcrypt hash of the password. Never exposed.
        refresh_token: The single valid refresh token, or None when logged out.
        avatar_url: Avatar media URL.
        cover_image_url: Cover image media URL.
        created_at: Creation timestamp, if the store tracks it.
        updated_at: Last update timestamp, if the store tracks it.
    """

    id: UUID
    username: str
    email: str
    full_name: str
    credential_hash: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)
    avatar_url: str = ""
    cover_image_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_principal(self) -> Principal:
        """Project the record to its sanitized view."""
        return Principal(
            id=self.id,
            username=self.username,
            email=self.email,
            full_name=self.full_name,
            avatar_url=self.avatar_url,
            cover_image_url=self.cover_image_url,
        )
