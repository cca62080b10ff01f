"""Tests for the FastAPI dependency functions."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from starlette.datastructures import State

from clipspace.foundation.application.context import (
    clear_principal_context,
    set_principal_context,
)
from clipspace.foundation.domain.exceptions import ConfigurationError, UnauthorizedError
from clipspace.foundation.domain.principal import Principal
from clipspace.infra.auth.dependencies import get_current_principal, get_session_manager
from clipspace.infra.auth.guard import ACCESS_TOKEN_COOKIE, AuthGuard

if TYPE_CHECKING:
    from clipspace.foundation.domain.principal import AccountRecord
    from clipspace.infra.auth.token_signer import TokenSigner
    from clipspace.infra.persistence.memory_account_repository import (
        InMemoryAccountRepository,
    )


def _request(
    *,
    guard: AuthGuard | None = None,
    cookies: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> MagicMock:
    request = MagicMock()
    request.app.state = State()
    if guard is not None:
        request.app.state.auth_guard = guard
    request.cookies = cookies or {}
    request.headers = headers or {}
    return request


@pytest.mark.unit
class TestGetCurrentPrincipal:
    def test_reads_context_first(self) -> None:
        principal = Principal(id=uuid4(), username="bob", email="bob@example.com", full_name="Bob")
        token = set_principal_context(principal)
        try:
            assert get_current_principal(_request()) is principal
        finally:
            clear_principal_context(token)

    def test_falls_back_to_guard(
        self, signer: TokenSigner, accounts: InMemoryAccountRepository, alice: AccountRecord
    ) -> None:
        request = _request(
            guard=AuthGuard(signer, accounts),
            cookies={ACCESS_TOKEN_COOKIE: signer.sign_access_token(alice)},
        )
        assert get_current_principal(request).id == alice.id

    def test_fallback_rejects_anonymous(
        self, signer: TokenSigner, accounts: InMemoryAccountRepository
    ) -> None:
        with pytest.raises(UnauthorizedError):
            get_current_principal(_request(guard=AuthGuard(signer, accounts)))

    def test_no_guard_configured(self) -> None:
        with pytest.raises(UnauthorizedError):
            get_current_principal(_request())


@pytest.mark.unit
class TestComponentDependencies:
    def test_missing_component(self) -> None:
        with pytest.raises(ConfigurationError):
            get_session_manager(_request())

    def test_returns_component(self) -> None:
        request = _request()
        manager = MagicMock()
        request.app.state.session_manager = manager
        assert get_session_manager(request) is manager
