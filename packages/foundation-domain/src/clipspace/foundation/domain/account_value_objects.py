"""Value objects for account fields.

Immutable, validated domain primitives. All validation occurs at construction.
Usernames and emails are normalised (trimmed, lowercased) so that lookups by
either identifier are case-insensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_USERNAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_.-]*$")

USERNAME_MAX_LENGTH = 64
FIELD_MAX_LENGTH = 255


def normalize_identifier(identifier: str) -> str:
    """Normalise a login identifier (username or email) for lookup.

    Args:
        identifier: Raw identifier as typed by the user.

    Returns:
        Trimmed, lowercased identifier.
    """
    return identifier.strip().lower()


@dataclass(frozen=True, slots=True)
class Username:
    """Validated, normalised username.

    Format: lowercase alphanumeric start, then letters, digits, ``_``, ``.``
    or ``-``; max 64 characters. Surrounding whitespace is stripped and the
    value is lowercased before validation.

    Attributes:
        value: The normalised username.

    Raises:
        ValueError: If the username is empty, too long or malformed.

    Example:
        >>> Username("  Alice ").value
        'alice'
    """

    value: str

    def __post_init__(self) -> None:
        normalized = normalize_identifier(self.value)
        if not normalized:
            msg = "Username cannot be empty"
            raise ValueError(msg)
        if len(normalized) > USERNAME_MAX_LENGTH:
            msg = f"Username too long: {len(normalized)} chars (max {USERNAME_MAX_LENGTH})"
            raise ValueError(msg)
        if not _USERNAME_PATTERN.match(normalized):
            msg = f"Invalid username format: '{normalized}'"
            raise ValueError(msg)
        object.__setattr__(self, "value", normalized)


@dataclass(frozen=True, slots=True)
class Email:
    """Validated, normalised email address.

    Attributes:
        value: The lowercased email string.

    Raises:
        ValueError: If email is empty, invalid or exceeds 255 chars.
    """

    value: str

    def __post_init__(self) -> None:
        normalized = normalize_identifier(self.value)
        if not normalized:
            msg = "Email cannot be empty"
            raise ValueError(msg)
        if len(normalized) > FIELD_MAX_LENGTH:
            msg = f"Email too long: {len(normalized)} chars (max {FIELD_MAX_LENGTH})"
            raise ValueError(msg)
        if not _EMAIL_PATTERN.match(normalized):
            msg = f"Invalid email format: '{normalized}'"
            raise ValueError(msg)
        object.__setattr__(self, "value", normalized)


@dataclass(frozen=True, slots=True)
class FullName:
    """Validated full name value object.

    Format: Non-empty string after whitespace stripping, max 255 characters.
    Case is preserved.

    Raises:
        ValueError: If the name is empty/whitespace-only or exceeds 255 chars.
    """

    value: str

    def __post_init__(self) -> None:
        stripped = self.value.strip()
        if not stripped:
            msg = "Full name cannot be empty"
            raise ValueError(msg)
        if len(stripped) > FIELD_MAX_LENGTH:
            msg = f"Full name too long: {len(stripped)} chars (max {FIELD_MAX_LENGTH})"
            raise ValueError(msg)
        object.__setattr__(self, "value", stripped)
