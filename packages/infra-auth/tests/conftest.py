"""Shared fixtures for infra-auth tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from clipspace.foundation.domain.principal import AccountRecord
from clipspace.infra.auth.credential_vault import CredentialVault
from clipspace.infra.auth.settings import AuthSettings
from clipspace.infra.auth.token_signer import TokenSigner, TokenSignerConfig
from clipspace.infra.persistence.memory_account_repository import InMemoryAccountRepository

ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"


class FrozenClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime.now(UTC).replace(microsecond=0))


@pytest.fixture()
def signer_config() -> TokenSignerConfig:
    return TokenSignerConfig(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=10),
    )


@pytest.fixture()
def signer(signer_config: TokenSignerConfig, clock: FrozenClock) -> TokenSigner:
    return TokenSigner(signer_config, clock=clock)


@pytest.fixture(scope="session")
def vault() -> CredentialVault:
    return CredentialVault(rounds=10)


@pytest.fixture()
def accounts() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture()
def alice(accounts: InMemoryAccountRepository, vault: CredentialVault) -> AccountRecord:
    """Account 'alice' whose password is 'correct-pw'."""
    record = AccountRecord(
        id=uuid4(),
        username="alice",
        email="alice@example.com",
        full_name="Alice Liddell",
        credential_hash=vault.hash("correct-pw"),
        avatar_url="https://cdn.example.com/alice.png",
    )
    accounts.add(record)
    return record


@pytest.fixture()
def auth_settings() -> AuthSettings:
    return AuthSettings(  # type: ignore[call-arg]
        _env_file=None,
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=REFRESH_SECRET,
        bcrypt_rounds=10,
        cookie_secure=False,
    )
