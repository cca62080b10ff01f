"""Clipspace Infra Auth -- credential hashing, session tokens, request guard.

Provides the bcrypt CredentialVault, the PyJWT TokenSigner, the
refresh-token session store, the request AuthGuard with its middleware and
FastAPI dependencies, the /auth router, and the lifespan hook that wires
them onto the application.
"""

from clipspace.infra.auth.credential_vault import CredentialVault
from clipspace.infra.auth.dependencies import CurrentPrincipal, get_current_principal
from clipspace.infra.auth.guard import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    AuthGuard,
    extract_token,
)
from clipspace.infra.auth.lifespan import lifespan_contribution
from clipspace.infra.auth.middleware.guard_middleware import GuardMiddleware
from clipspace.infra.auth.session_store import AccountSessionStore
from clipspace.infra.auth.settings import AuthSettings, get_auth_settings, load_auth_settings
from clipspace.infra.auth.token_signer import TokenSigner, TokenSignerConfig

__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "REFRESH_TOKEN_COOKIE",
    "AccountSessionStore",
    "AuthGuard",
    "AuthSettings",
    "CredentialVault",
    "CurrentPrincipal",
    "GuardMiddleware",
    "TokenSigner",
    "TokenSignerConfig",
    "extract_token",
    "get_auth_settings",
    "get_current_principal",
    "lifespan_contribution",
    "load_auth_settings",
]
