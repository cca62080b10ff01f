"""Persistence lifespan hook for startup/shutdown resource management.

Handles:
- Database health check on startup (SELECT 1)
- Account table creation
- Publishing the account repository on ``app.state``
- Engine disposal on shutdown

An application that already placed a repository on
``app.state.account_repository`` (an in-memory one, say) is left alone and
no database connection is made.

Priority 75 ensures persistence starts AFTER observability (50)
but BEFORE auth (100), which needs the repository.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from clipspace.foundation.application import LIFESPAN_PRIORITY_PERSISTENCE, LifespanContribution
from clipspace.infra.persistence.account_repository import SqlAccountRepository
from clipspace.infra.persistence.database import get_database_manager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _persistence_lifespan(app: Any) -> AsyncIterator[None]:
    """Manage persistence resources across the application lifecycle.

    Startup:
        1. Execute ``SELECT 1`` health check.
        2. Create the account table if missing.
        3. Store the SQL account repository on ``app.state``.

    Shutdown:
        1. Dispose the engine and its connection pool.

    Args:
        app: The application instance.
    """
    if getattr(app.state, "account_repository", None) is not None:
        logger.info("persistence_lifespan: account repository provided, skipping database")
        yield
        return

    manager = get_database_manager()

    await asyncio.to_thread(manager.ping)
    logger.info("persistence_lifespan: database health check passed")

    session_factory = manager.get_sync_session_factory()
    await asyncio.to_thread(SqlAccountRepository.ensure_table_exists, session_factory)
    app.state.database_manager = manager
    app.state.account_repository = SqlAccountRepository(session_factory)
    logger.info("persistence_lifespan: account repository ready")

    try:
        yield
    finally:
        manager.dispose()
        logger.info("persistence_lifespan: database engine disposed")


lifespan_contribution = LifespanContribution(
    hook=_persistence_lifespan,
    priority=LIFESPAN_PRIORITY_PERSISTENCE,
)
