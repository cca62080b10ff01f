"""Tests for GuardMiddleware: excluded paths, rejection, principal context."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from clipspace.foundation.application.context import get_current_principal
from clipspace.foundation.domain.exceptions import PersistenceError
from clipspace.infra.auth.guard import ACCESS_TOKEN_COOKIE, AuthGuard
from clipspace.infra.auth.middleware.guard_middleware import GuardMiddleware, contribution

if TYPE_CHECKING:
    from starlette.requests import Request

    from clipspace.foundation.domain.principal import AccountRecord
    from clipspace.infra.auth.token_signer import TokenSigner
    from clipspace.infra.persistence.memory_account_repository import (
        InMemoryAccountRepository,
    )


def _make_app(guard: AuthGuard | None = None, *, on_state: bool = False) -> Starlette:
    """Build a minimal Starlette app with GuardMiddleware."""

    async def whoami(request: Request) -> Response:
        return JSONResponse({"username": get_current_principal().username})

    async def health(request: Request) -> Response:
        return JSONResponse({"status": "ok"})

    app = Starlette(
        routes=[
            Route("/whoami", whoami),
            Route("/healthz", health),
            Route("/auth/login", health),
            Route("/auth/login-history", health),
            Route("/docs/oauth2-redirect", health),
            Route("/docs-private", health),
        ]
    )
    if on_state:
        app.state.auth_guard = guard
        app.add_middleware(GuardMiddleware)
    else:
        app.add_middleware(GuardMiddleware, guard=guard)
    return app


@pytest.fixture()
def guard(signer: TokenSigner, accounts: InMemoryAccountRepository) -> AuthGuard:
    return AuthGuard(signer, accounts)


@pytest.mark.unit
class TestExcludedPaths:
    def test_health_path_skips_auth(self) -> None:
        client = TestClient(_make_app(), raise_server_exceptions=False)
        response = client.get("/healthz")
        assert response.status_code == 200

    @pytest.mark.parametrize("path", ["/auth/login", "/docs/oauth2-redirect"])
    def test_exact_and_nested_paths_skip_auth(self, path: str) -> None:
        client = TestClient(_make_app(), raise_server_exceptions=False)
        assert client.get(path).status_code == 200

    @pytest.mark.parametrize("path", ["/auth/login-history", "/docs-private"])
    def test_lookalike_paths_require_auth(self, guard: AuthGuard, path: str) -> None:
        client = TestClient(_make_app(guard), raise_server_exceptions=False)
        response = client.get(path)
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"


@pytest.mark.unit
class TestRejection:
    def test_missing_token_returns_401(self, guard: AuthGuard) -> None:
        client = TestClient(_make_app(guard), raise_server_exceptions=False)
        response = client.get("/whoami")
        assert response.status_code == 401
        assert response.headers["content-type"] == "application/problem+json"
        assert response.headers["WWW-Authenticate"].startswith("Bearer")
        body = response.json()
        assert body["error_code"] == "UNAUTHORIZED"
        assert body["detail"] == "Unauthorized request"

    def test_causes_are_indistinguishable(
        self, guard: AuthGuard, signer: TokenSigner, alice: AccountRecord, accounts
    ) -> None:
        client = TestClient(_make_app(guard), raise_server_exceptions=False)
        missing = client.get("/whoami")
        garbage = client.get("/whoami", headers={"Authorization": "Bearer garbage"})
        token = signer.sign_access_token(alice)
        accounts.delete(alice.id)
        vanished = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert missing.json() == garbage.json() == vanished.json()

    def test_unconfigured_guard_returns_503(self) -> None:
        client = TestClient(_make_app(None), raise_server_exceptions=False)
        assert client.get("/whoami").status_code == 503

    def test_store_failure_returns_503(self) -> None:
        failing = MagicMock()
        failing.authenticate.side_effect = PersistenceError("get_by_id")
        client = TestClient(_make_app(failing), raise_server_exceptions=False)
        response = client.get("/whoami", headers={"Authorization": "Bearer x"})
        assert response.status_code == 503
        assert response.json()["error_code"] == "PERSISTENCE_ERROR"

    def test_unexpected_guard_error_returns_401(self) -> None:
        broken = MagicMock()
        broken.authenticate.side_effect = RuntimeError("boom")
        client = TestClient(_make_app(broken), raise_server_exceptions=False)
        response = client.get("/whoami", headers={"Authorization": "Bearer x"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized request"

    def test_non_string_key_id_returns_401(self, guard: AuthGuard) -> None:
        header = base64.urlsafe_b64encode(b'{"alg":"HS256","typ":"JWT","kid":1}').rstrip(b"=")
        payload = base64.urlsafe_b64encode(b'{"sub":"s","typ":"access"}').rstrip(b"=")
        token = f"{header.decode()}.{payload.decode()}.c2ln"
        client = TestClient(_make_app(guard), raise_server_exceptions=False)
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"


@pytest.mark.unit
class TestAuthenticated:
    def test_bearer_header_sets_principal(
        self, guard: AuthGuard, signer: TokenSigner, alice: AccountRecord
    ) -> None:
        client = TestClient(_make_app(guard))
        token = signer.sign_access_token(alice)
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json() == {"username": "alice"}

    def test_cookie_sets_principal(
        self, guard: AuthGuard, signer: TokenSigner, alice: AccountRecord
    ) -> None:
        client = TestClient(_make_app(guard))
        client.cookies.set(ACCESS_TOKEN_COOKIE, signer.sign_access_token(alice))
        assert client.get("/whoami").json() == {"username": "alice"}

    def test_guard_resolved_from_app_state(
        self, guard: AuthGuard, signer: TokenSigner, alice: AccountRecord
    ) -> None:
        client = TestClient(_make_app(guard, on_state=True))
        token = signer.sign_access_token(alice)
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200


@pytest.mark.unit
class TestContribution:
    def test_security_band_priority(self) -> None:
        assert contribution.middleware_class is GuardMiddleware
        assert contribution.priority == 150
