"""Clipspace Accounts application factory.

Demonstrates the consumer pattern: bring your domain router and an account
repository; the auth router, guard middleware, error handlers, health
endpoint and lifespan hooks are auto-discovered from the installed
clipspace packages.

Usage::

    from examples.clipspace_accounts.app import create_accounts_app

    app = create_accounts_app()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from clipspace.infra.fastapi import AppSettings, create_app
from clipspace.infra.persistence import InMemoryAccountRepository

from .router import router as clips_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from clipspace.foundation.domain.ports import AccountRepositoryPort
    from clipspace.infra.auth import AuthSettings


def create_accounts_app(
    *,
    repository: AccountRepositoryPort | None = None,
    auth_settings: AuthSettings | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create the example app.

    Args:
        repository: Account store. Defaults to an in-memory repository, in
            which case the persistence lifespan leaves the database alone.
        auth_settings: Auth configuration. ``None`` loads ``AUTH_*`` from the
            environment when the auth lifespan starts.
        exclude_names: Entry-point names to suppress.
    """
    app = create_app(
        settings=AppSettings(title="Clipspace Accounts", version="0.1.0"),
        extra_routers=[clips_router],
        exclude_names=exclude_names,
    )
    app.state.account_repository = (
        repository if repository is not None else InMemoryAccountRepository()
    )
    if auth_settings is not None:
        app.state.auth_settings = auth_settings
    return app
