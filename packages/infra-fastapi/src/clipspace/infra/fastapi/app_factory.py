"""FastAPI application factory with entry-point auto-discovery.

:func:`create_app` loads routers, middleware, error handlers and lifespan
hooks from the installed clipspace distributions and wires them into one
application. Callers add their own pieces through the ``extra_*`` arguments.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from clipspace.foundation.application import (
    ContributionGroup,
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    discover,
)
from clipspace.infra.fastapi.lifespan import compose_lifespan
from clipspace.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

    from clipspace.foundation.application import DiscoveredContribution

logger = logging.getLogger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    extra_routers: list[APIRouter] | None = None,
    extra_middleware: list[MiddlewareContribution] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    extra_error_handlers: list[ErrorHandlerContribution] | None = None,
    exclude_groups: frozenset[str] | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create a FastAPI application with auto-discovered contributions.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        extra_routers: Routers to include besides the discovered ones.
        extra_middleware: Middleware besides the discovered ones.
        extra_lifespan_hooks: Lifespan hooks besides the discovered ones.
        extra_error_handlers: Error handlers besides the discovered ones.
        exclude_groups: Entry point groups to skip entirely.
        exclude_names: Entry point names to skip in every group.

    Returns:
        Configured FastAPI application. Lifespan hooks run when the server
        (or a ``TestClient`` context) starts it.
    """
    settings = settings or AppSettings()
    skip_groups = exclude_groups if exclude_groups is not None else settings.exclude_groups
    skip_names = exclude_names if exclude_names is not None else settings.exclude_entry_points

    def _discovered(group: ContributionGroup) -> list[DiscoveredContribution]:
        if group in skip_groups:
            logger.info("discovery_group_excluded", extra={"group": str(group)})
            return []
        return discover(group, exclude_names=skip_names)

    lifespan_hooks: list[LifespanContribution] = list(extra_lifespan_hooks or [])
    for contrib in _discovered(ContributionGroup.LIFESPAN):
        if isinstance(contrib.value, LifespanContribution):
            lifespan_hooks.append(contrib.value)
        else:
            # Bare async context manager factory; default priority.
            lifespan_hooks.append(LifespanContribution(hook=contrib.value))

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        debug=settings.debug,
        lifespan=compose_lifespan(lifespan_hooks),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )

    middleware: list[MiddlewareContribution] = list(extra_middleware or [])
    for contrib in _discovered(ContributionGroup.MIDDLEWARE):
        if isinstance(contrib.value, MiddlewareContribution):
            middleware.append(contrib.value)
        else:
            logger.warning(
                "Middleware entry point %r did not return a MiddlewareContribution",
                contrib.name,
            )

    # Starlette wraps in LIFO order: add the innermost (highest priority) first.
    middleware.sort(key=lambda m: m.priority)
    for mw in reversed(middleware):
        app.add_middleware(mw.middleware_class, **mw.kwargs)
        logger.info(
            "Registered middleware %s (priority=%d)",
            mw.middleware_class.__name__,
            mw.priority,
        )

    error_handlers: list[ErrorHandlerContribution] = list(extra_error_handlers or [])
    for contrib in _discovered(ContributionGroup.ERROR_HANDLERS):
        if isinstance(contrib.value, ErrorHandlerContribution):
            error_handlers.append(contrib.value)
        elif callable(contrib.value):
            # A register function: register(app) -> None
            contrib.value(app)
        else:
            logger.warning(
                "Error handler entry point %r is not an ErrorHandlerContribution or callable",
                contrib.name,
            )

    for eh in error_handlers:
        app.add_exception_handler(eh.exception_class, eh.handler)
        logger.info("Registered error handler for %s", eh.exception_class.__name__)

    routers: list[APIRouter] = list(extra_routers or [])
    routers.extend(contrib.value for contrib in _discovered(ContributionGroup.ROUTERS))
    for router in routers:
        app.include_router(router)
        logger.info("Included router: %r", router.prefix or "/")

    return app
