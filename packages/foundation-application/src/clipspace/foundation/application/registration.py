"""Account registration: seeds the credential store.

Validates the profile fields, rejects duplicates, hashes the password and
inserts the account without a session. The plaintext password exists only in
the caller's arguments; it is never logged or stored.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TypeVar
from uuid import uuid4

from clipspace.foundation.domain.account_value_objects import Email, FullName, Username
from clipspace.foundation.domain.exceptions import ConflictError, ValidationError
from clipspace.foundation.domain.principal import AccountRecord

if TYPE_CHECKING:
    from clipspace.foundation.domain.ports import AccountRepositoryPort, CredentialHasherPort
    from clipspace.foundation.domain.principal import Principal

logger = logging.getLogger(__name__)

_VO = TypeVar("_VO", Username, Email, FullName)


class AccountRegistrar:
    """Creates accounts.

    Args:
        accounts: Account persistence.
        hasher: Password hashing (CredentialVault).
    """

    def __init__(self, accounts: AccountRepositoryPort, hasher: CredentialHasherPort) -> None:
        self._accounts = accounts
        self._hasher = hasher

    def register(
        self,
        username: str,
        email: str,
        full_name: str,
        password: str,
        avatar_url: str,
        cover_image_url: str = "",
    ) -> Principal:
        """Register a new account.

        Returns:
            Sanitized principal of the created account.

        Raises:
            ValidationError: If a field is empty or malformed.
            ConflictError: If the username or email is already taken.
            HashingFailureError: If hashing fails.
            PersistenceError: If the insert fails.
        """
        username_vo = _validated("username", Username, username)
        email_vo = _validated("email", Email, email)
        full_name_vo = _validated("full_name", FullName, full_name)
        if not password:
            raise ValidationError("password", "Password is required")
        if not avatar_url or not avatar_url.strip():
            raise ValidationError("avatar_url", "Avatar is required")

        for field_name, value in (("username", username_vo.value), ("email", email_vo.value)):
            if self._accounts.find_by_identifier(value) is not None:
                logger.info("registration_rejected", extra={"reason": f"duplicate_{field_name}"})
                raise ConflictError("Username or email already registered", field=field_name)

        now = datetime.now(UTC)
        account = AccountRecord(
            id=uuid4(),
            username=username_vo.value,
            email=email_vo.value,
            full_name=full_name_vo.value,
            credential_hash=self._hasher.hash(password),
            avatar_url=avatar_url.strip(),
            cover_image_url=(cover_image_url or "").strip(),
            created_at=now,
            updated_at=now,
        )
        self._accounts.add(account)

        logger.info("account_registered", extra={"account_id": str(account.id)})
        return account.to_principal()


def _validated(field_name: str, value_type: type[_VO], raw: str | None) -> _VO:
    try:
        return value_type(raw or "")
    except ValueError as exc:
        raise ValidationError(field_name, str(exc)) from exc
