"""Aggregated health check endpoint.

Reports the account store's reachability. When the application runs without
a database (in-memory repository) the check is reported as skipped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


async def _check_database(request: Request) -> dict[str, str]:
    """Run ``SELECT 1`` through the lifespan's DatabaseManager."""
    manager = getattr(request.app.state, "database_manager", None)
    if manager is None:
        return {"status": "skipped"}
    try:
        await asyncio.to_thread(manager.ping)
    except SQLAlchemyError as exc:
        logger.warning("health_check_database_unhealthy", extra={"error": type(exc).__name__})
        return {"status": "error", "detail": type(exc).__name__}
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(request: Request) -> Any:
    """Return 200 when every check passes or is skipped, 503 otherwise."""
    checks = {"database": await _check_database(request)}

    healthy = all(c["status"] in ("ok", "skipped") for c in checks.values())
    return JSONResponse(
        content={"status": "ok" if healthy else "degraded", "checks": checks},
        status_code=200 if healthy else 503,
    )
