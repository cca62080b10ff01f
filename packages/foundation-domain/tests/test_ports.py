"""Tests for port protocol conformance."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from clipspace.foundation.domain.ports import (
    AccountRepositoryPort,
    CredentialHasherPort,
    SessionStorePort,
    TokenSignerPort,
)

if TYPE_CHECKING:
    from uuid import UUID


class _FakeHasher:
    """Fake hasher that conforms to CredentialHasherPort protocol."""

    def hash(self, plaintext: str) -> str:
        return f"hashed:{plaintext}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hashed == f"hashed:{plaintext}"


class _FakeSessionStore:
    """Fake store that conforms to SessionStorePort protocol."""

    def __init__(self) -> None:
        self._tokens: dict[UUID, str] = {}

    def get(self, principal_id: UUID) -> str | None:
        return self._tokens.get(principal_id)

    def set(self, principal_id: UUID, token: str) -> None:
        self._tokens[principal_id] = token

    def compare_and_set(self, principal_id: UUID, expected: str, token: str) -> bool:
        if self._tokens.get(principal_id) != expected:
            return False
        self._tokens[principal_id] = token
        return True

    def clear(self, principal_id: UUID) -> None:
        self._tokens.pop(principal_id, None)


class _FakeSigner:
    """Fake signer that conforms to TokenSignerPort protocol."""

    def sign_access_token(self, account: Any) -> str:
        return "access"

    def sign_refresh_token(self, subject: str) -> str:
        return "refresh"

    def verify(self, token: str, purpose: Any) -> Any:
        return None


class _NotAPort:
    """Class that does NOT conform to any port protocol."""

    def unrelated_method(self) -> None:
        pass


@pytest.mark.unit
class TestPortConformance:
    def test_hasher_conforms(self) -> None:
        assert isinstance(_FakeHasher(), CredentialHasherPort)

    def test_session_store_conforms(self) -> None:
        assert isinstance(_FakeSessionStore(), SessionStorePort)

    def test_signer_conforms(self) -> None:
        assert isinstance(_FakeSigner(), TokenSignerPort)

    @pytest.mark.parametrize(
        "port",
        [AccountRepositoryPort, CredentialHasherPort, SessionStorePort, TokenSignerPort],
    )
    def test_unrelated_class_does_not_conform(self, port: type) -> None:
        assert not isinstance(_NotAPort(), port)

    def test_fake_session_store_compare_and_set(self) -> None:
        from uuid import uuid4

        store = _FakeSessionStore()
        pid = uuid4()
        store.set(pid, "r1")
        assert store.compare_and_set(pid, "r0", "r2") is False
        assert store.compare_and_set(pid, "r1", "r2") is True
        assert store.get(pid) == "r2"
