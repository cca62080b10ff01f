"""Auth REST API router.

Thin transport over SessionManager and AccountRegistrar. Session tokens are
delivered as HTTP-only cookies and echoed in the response body for clients
that cannot use cookies.

Login and refresh failures are collapsed at this boundary: every login
failure becomes 401 INVALID_CREDENTIALS and every refresh failure becomes
401 INVALID_TOKEN, so a caller cannot probe which usernames exist.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, Field

from clipspace.foundation.application.session_manager import SessionGrant  # noqa: TC001
from clipspace.foundation.domain.exceptions import (
    InvalidCredentialError,
    InvalidTokenError,
    PrincipalNotFoundError,
)
from clipspace.foundation.domain.principal import Principal  # noqa: TC001
from clipspace.infra.auth.dependencies import (
    AccountRegistrarDep,
    AuthSettingsDep,
    CurrentPrincipal,
    SessionManagerDep,
)
from clipspace.infra.auth.guard import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from clipspace.infra.auth.settings import AuthSettings  # noqa: TC001

router = APIRouter(prefix="/auth", tags=["auth"])


# -- Request / Response models ------------------------------------------------


class RegisterRequest(BaseModel):
    username: str
    email: str
    full_name: str
    password: str = Field(repr=False)
    avatar_url: str
    cover_image_url: str = ""


class LoginRequest(BaseModel):
    """Either ``username`` or ``email`` identifies the account."""

    username: str | None = None
    email: str | None = None
    password: str = Field(repr=False)


class RefreshRequest(BaseModel):
    refresh_token: str | None = Field(default=None, repr=False)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(repr=False)
    new_password: str = Field(repr=False)


class PrincipalResponse(BaseModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str


class SessionResponse(BaseModel):
    user: PrincipalResponse
    access_token: str
    refresh_token: str


class MessageResponse(BaseModel):
    message: str


# -- Endpoints ----------------------------------------------------------------


@router.post("/register", status_code=201)
def register(body: RegisterRequest, registrar: AccountRegistrarDep) -> PrincipalResponse:
    """Create an account. The new account starts logged out."""
    principal = registrar.register(
        username=body.username,
        email=body.email,
        full_name=body.full_name,
        password=body.password,
        avatar_url=body.avatar_url,
        cover_image_url=body.cover_image_url,
    )
    return _principal_response(principal)


@router.post("/login")
def login(
    body: LoginRequest,
    response: Response,
    manager: SessionManagerDep,
    settings: AuthSettingsDep,
) -> SessionResponse:
    """Authenticate by username or email and open a session."""
    identifier = body.username or body.email or ""
    try:
        grant = manager.login(identifier, body.password)
    except PrincipalNotFoundError:
        raise InvalidCredentialError() from None
    _set_session_cookies(response, grant, settings)
    return _session_response(grant)


@router.post("/refresh")
def refresh(
    request: Request,
    response: Response,
    manager: SessionManagerDep,
    settings: AuthSettingsDep,
    body: RefreshRequest | None = None,
) -> SessionResponse:
    """Rotate the session: the presented refresh token is spent."""
    presented = request.cookies.get(REFRESH_TOKEN_COOKIE) or (
        body.refresh_token if body is not None else None
    )
    try:
        grant = manager.refresh(presented)
    except PrincipalNotFoundError:
        raise InvalidTokenError("principal_missing") from None
    _set_session_cookies(response, grant, settings)
    return _session_response(grant)


@router.post("/logout")
def logout(
    principal: CurrentPrincipal,
    response: Response,
    manager: SessionManagerDep,
    settings: AuthSettingsDep,
) -> MessageResponse:
    """Close the session and drop both cookies."""
    manager.logout(principal.id)
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )
    return MessageResponse(message="Logged out")


@router.post("/change-password")
def change_password(
    body: ChangePasswordRequest,
    principal: CurrentPrincipal,
    manager: SessionManagerDep,
) -> MessageResponse:
    """Replace the password of the authenticated account."""
    manager.change_credential(principal.id, body.old_password, body.new_password)
    return MessageResponse(message="Password changed")


@router.get("/me")
def me(principal: CurrentPrincipal) -> PrincipalResponse:
    """Return the authenticated account."""
    return _principal_response(principal)


# -- Helpers ------------------------------------------------------------------


def _set_session_cookies(response: Response, grant: SessionGrant, settings: AuthSettings) -> None:
    for name, value, max_age in (
        (ACCESS_TOKEN_COOKIE, grant.access_token, settings.access_token_ttl),
        (REFRESH_TOKEN_COOKIE, grant.refresh_token, settings.refresh_token_ttl),
    ):
        response.set_cookie(
            name,
            value,
            max_age=max_age,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )


def _principal_response(principal: Principal) -> PrincipalResponse:
    return PrincipalResponse(
        id=str(principal.id),
        username=principal.username,
        email=principal.email,
        full_name=principal.full_name,
        avatar_url=principal.avatar_url,
        cover_image_url=principal.cover_image_url,
    )


def _session_response(grant: SessionGrant) -> SessionResponse:
    return SessionResponse(
        user=_principal_response(grant.principal),
        access_token=grant.access_token,
        refresh_token=grant.refresh_token,
    )
