"""Authentication middleware running the AuthGuard on protected paths.

Sets the principal context for the duration of the request so handlers and
dependencies can read it. Public paths (login, refresh, register, health,
docs) are excluded.

Middleware position in stack (LIFO registration order):
  Request -> RequestId -> Guard -> CORS -> Route

Auth errors are returned as JSONResponse directly rather than raised,
because exceptions raised inside BaseHTTPMiddleware.dispatch bypass the
application's exception handlers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from clipspace.foundation.application.context import (
    clear_principal_context,
    set_principal_context,
)
from clipspace.foundation.application.contributions import MiddlewareContribution
from clipspace.foundation.domain.exceptions import PersistenceError, UnauthorizedError
from clipspace.infra.auth.guard import ACCESS_TOKEN_COOKIE

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response

    from clipspace.infra.auth.guard import AuthGuard

logger = logging.getLogger(__name__)

# Default paths excluded from authentication.
DEFAULT_EXCLUDED_PREFIXES = (
    "/auth/login",
    "/auth/refresh",
    "/auth/register",
    "/healthz",
    "/docs",
    "/openapi.json",
    "/redoc",
)

_PROBLEM_MEDIA_TYPE = "application/problem+json"


class GuardMiddleware(BaseHTTPMiddleware):
    """Runs :class:`AuthGuard` for every non-excluded request.

    Request flow:
    1. Excluded path -> pass through
    2. Resolve the guard (constructor argument, else ``app.state.auth_guard``)
    3. Authenticate from the ``accessToken`` cookie or Bearer header
    4. Set the principal context and call the next handler

    Error flow:
    - Guard not configured -> 503 (service_unavailable)
    - Any authentication failure -> 401 (invalid_token)
    - Account store failure -> 503 (persistence_error)
    - Unexpected guard error -> logged, 401 (invalid_token)

    All 401 responses include WWW-Authenticate: Bearer header per RFC 6750.
    """

    def __init__(
        self,
        app: Any,
        guard: AuthGuard | None = None,
        excluded_prefixes: tuple[str, ...] | None = None,
    ) -> None:
        """Initialize the guard middleware.

        Args:
            app: ASGI application (passed by Starlette).
            guard: Guard to use. None resolves ``app.state.auth_guard`` per
                request, which the auth lifespan populates at startup.
            excluded_prefixes: Paths that skip authentication, together with
                everything beneath them (``/docs`` covers ``/docs/oauth2``
                but not ``/docs-private``).
        """
        super().__init__(app)
        self._guard = guard
        self._excluded_prefixes = (
            excluded_prefixes if excluded_prefixes is not None else DEFAULT_EXCLUDED_PREFIXES
        )

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if self._is_excluded(path):
            return await call_next(request)

        guard = self._guard or getattr(request.app.state, "auth_guard", None)
        if guard is None:
            return self._auth_error(
                request,
                503,
                "service_unavailable",
                "Authentication service not configured",
            )

        try:
            principal = await asyncio.to_thread(
                guard.authenticate,
                request.cookies.get(ACCESS_TOKEN_COOKIE),
                request.headers.get("Authorization"),
            )
        except UnauthorizedError as exc:
            return self._auth_error(request, 401, "invalid_token", exc.message)
        except PersistenceError:
            logger.exception("auth_guard_store_failed", extra={"path": path})
            return self._auth_error(
                request,
                503,
                "persistence_error",
                "Account store temporarily unavailable",
            )
        except Exception:
            logger.exception("auth_guard_unexpected_error", extra={"path": path})
            return self._auth_error(request, 401, "invalid_token", "Unauthorized request")

        request.state.principal = principal
        principal_token = set_principal_context(principal)
        try:
            return await call_next(request)
        finally:
            clear_principal_context(principal_token)

    def _is_excluded(self, path: str) -> bool:
        """Match an excluded prefix exactly or as a parent path segment."""
        for prefix in self._excluded_prefixes:
            base = prefix.rstrip("/")
            if path == base or path.startswith(base + "/"):
                return True
        return False

    def _auth_error(
        self,
        request: Request,
        status_code: int,
        error_code: str,
        message: str,
    ) -> JSONResponse:
        """Build RFC 7807 + RFC 6750 compliant error response."""
        logger.info(
            "auth_validation_failed",
            extra={
                "error_code": error_code,
                "path": request.url.path,
                "method": request.method,
            },
        )

        headers: dict[str, str] = {}
        if status_code == 401:
            headers["WWW-Authenticate"] = (
                f'Bearer realm="API", error="{error_code}", error_description="{message}"'
            )

        title = "Unauthorized" if status_code == 401 else "Service Unavailable"
        return JSONResponse(
            status_code=status_code,
            content={
                "type": f"/errors/{error_code.replace('_', '-')}",
                "title": title,
                "status": status_code,
                "detail": message,
                "error_code": "UNAUTHORIZED" if status_code == 401 else error_code.upper(),
                "instance": str(request.url.path),
            },
            media_type=_PROBLEM_MEDIA_TYPE,
            headers=headers,
        )


contribution = MiddlewareContribution(
    middleware_class=GuardMiddleware,
    priority=150,  # Security band (100-199)
)
