"""Shared fakes and fixtures for foundation-application tests."""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import pytest

from clipspace.foundation.application.registration import AccountRegistrar
from clipspace.foundation.application.session_manager import SessionManager
from clipspace.foundation.domain.exceptions import InvalidTokenError, PrincipalNotFoundError
from clipspace.foundation.domain.principal import AccountRecord
from clipspace.foundation.domain.tokens import TokenClaims, TokenPurpose

if TYPE_CHECKING:
    from clipspace.foundation.domain.ports import SessionStorePort


class FakeHasher:
    """Reversible stand-in for the bcrypt vault."""

    def hash(self, plaintext: str) -> str:
        return f"hashed:{plaintext}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hashed == f"hashed:{plaintext}"


class FakeSigner:
    """Signer producing ``purpose|subject|serial`` tokens."""

    def __init__(self) -> None:
        self._serial = itertools.count(1)
        self.expired: set[str] = set()

    def sign_access_token(self, account: AccountRecord) -> str:
        return f"access|{account.id}|{next(self._serial)}"

    def sign_refresh_token(self, subject: str) -> str:
        return f"refresh|{subject}|{next(self._serial)}"

    def verify(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        parts = token.split("|")
        if len(parts) != 3:
            raise InvalidTokenError("malformed")
        if token in self.expired:
            raise InvalidTokenError("expired")
        if parts[0] != purpose.value:
            raise InvalidTokenError("wrong_purpose")
        now = datetime.now(UTC)
        return TokenClaims(
            subject=parts[1],
            purpose=purpose,
            issued_at=now,
            expires_at=now,
            token_id=parts[2],
        )


class FakeAccounts:
    """Dict-backed account repository."""

    def __init__(self) -> None:
        self.rows: dict[UUID, AccountRecord] = {}

    def get_by_id(self, account_id: UUID) -> AccountRecord | None:
        return self.rows.get(account_id)

    def find_by_identifier(self, identifier: str) -> AccountRecord | None:
        for row in self.rows.values():
            if identifier in (row.username, row.email):
                return row
        return None

    def add(self, account: AccountRecord) -> None:
        self.rows[account.id] = account

    def delete(self, account_id: UUID) -> None:
        self.rows.pop(account_id, None)

    def get_refresh_token(self, account_id: UUID) -> str | None:
        row = self.rows.get(account_id)
        return row.refresh_token if row else None

    def set_refresh_token(self, account_id: UUID, token: str) -> None:
        if account_id not in self.rows:
            raise PrincipalNotFoundError(account_id)
        self.rows[account_id] = replace(self.rows[account_id], refresh_token=token)

    def compare_and_set_refresh_token(self, account_id: UUID, expected: str, token: str) -> bool:
        row = self.rows.get(account_id)
        if row is None or row.refresh_token != expected:
            return False
        self.rows[account_id] = replace(row, refresh_token=token)
        return True

    def clear_refresh_token(self, account_id: UUID) -> None:
        if account_id in self.rows:
            self.rows[account_id] = replace(self.rows[account_id], refresh_token=None)

    def update_credential_hash(self, account_id: UUID, credential_hash: str) -> None:
        if account_id not in self.rows:
            raise PrincipalNotFoundError(account_id)
        self.rows[account_id] = replace(self.rows[account_id], credential_hash=credential_hash)


class FakeSessionStore:
    """Session store delegating to FakeAccounts, like the real adapter."""

    def __init__(self, accounts: FakeAccounts) -> None:
        self._accounts = accounts

    def get(self, principal_id: UUID) -> str | None:
        return self._accounts.get_refresh_token(principal_id)

    def set(self, principal_id: UUID, token: str) -> None:
        self._accounts.set_refresh_token(principal_id, token)

    def compare_and_set(self, principal_id: UUID, expected: str, token: str) -> bool:
        return self._accounts.compare_and_set_refresh_token(principal_id, expected, token)

    def clear(self, principal_id: UUID) -> None:
        self._accounts.clear_refresh_token(principal_id)


@pytest.fixture()
def accounts() -> FakeAccounts:
    return FakeAccounts()


@pytest.fixture()
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture()
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture()
def sessions(accounts: FakeAccounts) -> SessionStorePort:
    return FakeSessionStore(accounts)


@pytest.fixture()
def alice(accounts: FakeAccounts) -> AccountRecord:
    """Account 'alice' whose password is 'correct-pw'."""
    record = AccountRecord(
        id=uuid4(),
        username="alice",
        email="alice@example.com",
        full_name="Alice Liddell",
        credential_hash="hashed:correct-pw",
        avatar_url="https://cdn.example.com/alice.png",
    )
    accounts.add(record)
    return record


@pytest.fixture()
def manager(
    accounts: FakeAccounts,
    hasher: FakeHasher,
    signer: FakeSigner,
    sessions: SessionStorePort,
) -> SessionManager:
    return SessionManager(accounts=accounts, hasher=hasher, signer=signer, sessions=sessions)


@pytest.fixture()
def registrar(accounts: FakeAccounts, hasher: FakeHasher) -> AccountRegistrar:
    return AccountRegistrar(accounts=accounts, hasher=hasher)
