"""Auth lifespan hook: builds the session core onto ``app.state``.

Priority 100 runs after persistence (75), which provides
``app.state.account_repository``. Configuration errors are fatal here, at
startup, rather than surfacing on the first request.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from clipspace.foundation.application import (
    LIFESPAN_PRIORITY_AUTH,
    AccountRegistrar,
    LifespanContribution,
    SessionManager,
)
from clipspace.foundation.domain.exceptions import ConfigurationError
from clipspace.infra.auth.credential_vault import CredentialVault
from clipspace.infra.auth.guard import AuthGuard
from clipspace.infra.auth.session_store import AccountSessionStore
from clipspace.infra.auth.settings import get_auth_settings
from clipspace.infra.auth.token_signer import TokenSigner

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _auth_lifespan(app: Any) -> AsyncIterator[None]:
    """Wire CredentialVault, TokenSigner, session store, manager and guard.

    Args:
        app: The application instance; must already carry
            ``state.account_repository``.

    Raises:
        ConfigurationError: If settings are invalid or no repository is set.
    """
    settings = getattr(app.state, "auth_settings", None) or get_auth_settings()

    accounts = getattr(app.state, "account_repository", None)
    if accounts is None:
        raise ConfigurationError(
            "No account repository configured",
            context={"expected": "app.state.account_repository"},
        )

    vault = CredentialVault(rounds=settings.bcrypt_rounds)
    signer = TokenSigner(settings.to_signer_config())
    sessions = AccountSessionStore(accounts)

    app.state.auth_settings = settings
    app.state.credential_vault = vault
    app.state.token_signer = signer
    app.state.session_store = sessions
    app.state.session_manager = SessionManager(accounts, vault, signer, sessions)
    app.state.account_registrar = AccountRegistrar(accounts, vault)
    app.state.auth_guard = AuthGuard(signer, accounts)
    logger.info(
        "auth_lifespan: session core initialized",
        extra={"issuer": settings.token_issuer, "bcrypt_rounds": settings.bcrypt_rounds},
    )

    try:
        yield
    finally:
        logger.info("auth_lifespan: shutdown complete")


lifespan_contribution = LifespanContribution(
    hook=_auth_lifespan,
    priority=LIFESPAN_PRIORITY_AUTH,
)
