"""FastAPI dependency functions for authentication and the auth components.

Usage:
    from clipspace.infra.auth.dependencies import CurrentPrincipal

    @router.get("/clips")
    def list_clips(principal: CurrentPrincipal) -> ...:
        # principal.id, principal.username available
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends, Request

from clipspace.foundation.application.context import get_optional_principal
from clipspace.foundation.application.registration import AccountRegistrar
from clipspace.foundation.application.session_manager import SessionManager
from clipspace.foundation.domain.exceptions import ConfigurationError, UnauthorizedError
from clipspace.foundation.domain.principal import Principal
from clipspace.infra.auth.guard import ACCESS_TOKEN_COOKIE
from clipspace.infra.auth.settings import AuthSettings

if TYPE_CHECKING:
    from clipspace.infra.auth.guard import AuthGuard


def get_current_principal(request: Request) -> Principal:
    """FastAPI dependency that returns the authenticated principal.

    Reads the principal ContextVar set by GuardMiddleware. When the
    middleware is not installed (or the path is excluded from it), runs the
    guard on the request directly. Sync function, so FastAPI calls it in its
    worker pool and the account lookup does not block the event loop.

    Raises:
        UnauthorizedError: If the request does not authenticate.
    """
    principal = get_optional_principal()
    if principal is not None:
        return principal

    guard: AuthGuard | None = getattr(request.app.state, "auth_guard", None)
    if guard is None:
        raise UnauthorizedError("guard_unconfigured")
    return guard.authenticate(
        request.cookies.get(ACCESS_TOKEN_COOKIE),
        request.headers.get("Authorization"),
    )


# Type alias for cleaner endpoint signatures
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def _app_state_component(request: Request, name: str) -> Any:
    component = getattr(request.app.state, name, None)
    if component is None:
        raise ConfigurationError(
            "Authentication components are not initialised",
            context={"component": name},
        )
    return component


def get_session_manager(request: Request) -> SessionManager:
    """Return the SessionManager built by the auth lifespan."""
    manager: SessionManager = _app_state_component(request, "session_manager")
    return manager


def get_account_registrar(request: Request) -> AccountRegistrar:
    """Return the AccountRegistrar built by the auth lifespan."""
    registrar: AccountRegistrar = _app_state_component(request, "account_registrar")
    return registrar


def get_auth_settings_from_app(request: Request) -> AuthSettings:
    """Return the AuthSettings loaded by the auth lifespan."""
    settings: AuthSettings = _app_state_component(request, "auth_settings")
    return settings


SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]
AccountRegistrarDep = Annotated[AccountRegistrar, Depends(get_account_registrar)]
AuthSettingsDep = Annotated[AuthSettings, Depends(get_auth_settings_from_app)]
