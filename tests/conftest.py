"""Shared fixtures for integration tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from examples.clipspace_accounts.app import create_accounts_app
from examples.clipspace_accounts.router import _clips
from fastapi.testclient import TestClient

from clipspace.infra.auth import AuthSettings
from clipspace.infra.persistence import InMemoryAccountRepository

if TYPE_CHECKING:
    from collections.abc import Iterator

    from fastapi import FastAPI


@pytest.fixture()
def auth_settings() -> AuthSettings:
    """Test secrets, cheap bcrypt cost and non-Secure cookies (TestClient speaks http)."""
    return AuthSettings(  # type: ignore[call-arg]
        _env_file=None,
        access_token_secret="integration-access-secret-0123456789abcdef",
        refresh_token_secret="integration-refresh-secret-0123456789abcdef",
        bcrypt_rounds=10,
        cookie_secure=False,
    )


@pytest.fixture()
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture()
def accounts_app(
    auth_settings: AuthSettings,
    account_repository: InMemoryAccountRepository,
) -> FastAPI:
    """Fresh example app per test, backed by the in-memory repository."""
    _clips.clear()
    return create_accounts_app(repository=account_repository, auth_settings=auth_settings)


@pytest.fixture()
def client(accounts_app: FastAPI) -> Iterator[TestClient]:
    """TestClient for the example app (lifespan hooks executed)."""
    with TestClient(accounts_app, raise_server_exceptions=False) as c:
        yield c
    _clips.clear()


@pytest.fixture()
def alice_payload() -> dict[str, str]:
    return {
        "username": "Alice",
        "email": "Alice@Example.com",
        "full_name": "Alice Liddell",
        "password": "correct horse battery",
        "avatar_url": "https://media.example/alice.png",
    }


@pytest.fixture()
def registered(client: TestClient, alice_payload: dict[str, str]) -> dict[str, Any]:
    """Register Alice and return the created account body."""
    resp = client.post("/auth/register", json=alice_payload)
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture()
def session(
    client: TestClient,
    registered: dict[str, Any],
    alice_payload: dict[str, str],
) -> dict[str, Any]:
    """Log Alice in; the client now holds the session cookies."""
    resp = client.post(
        "/auth/login",
        json={"username": "alice", "password": alice_payload["password"]},
    )
    assert resp.status_code == 200
    return resp.json()
