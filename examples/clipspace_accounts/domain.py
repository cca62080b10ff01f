"""Clip record owned by an account, and its not-found error."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from clipspace.foundation.domain import NotFoundError, ValidationError

MAX_TITLE_LENGTH = 120


@dataclass(frozen=True, slots=True)
class Clip:
    """A short video clip uploaded by one account.

    Example:
        >>> clip = Clip.create(owner_id=uuid4(), title="Sunset")
        >>> clip.title
        'Sunset'
    """

    owner_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, *, owner_id: UUID, title: str) -> Clip:
        """Build a clip after checking the title.

        Raises:
            ValidationError: If the title is blank or too long.
        """
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("title", "Title is required")
        if len(cleaned) > MAX_TITLE_LENGTH:
            raise ValidationError("title", f"Title must be at most {MAX_TITLE_LENGTH} characters")
        return cls(owner_id=owner_id, title=cleaned)


class ClipNotFoundError(NotFoundError):
    """Raised when a clip does not exist or belongs to another account."""

    def __init__(self, clip_id: str) -> None:
        super().__init__("Clip", clip_id)
