"""Clipspace Infra FastAPI -- app factory, error handlers, request-ID middleware, health."""

from clipspace.infra.fastapi.app_factory import create_app
from clipspace.infra.fastapi.error_handlers import (
    PROBLEM_MEDIA_TYPE,
    ProblemDetail,
    register_exception_handlers,
)
from clipspace.infra.fastapi.lifespan import compose_lifespan
from clipspace.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    get_request_id,
)
from clipspace.infra.fastapi.settings import AppSettings, CORSSettings

__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "AppSettings",
    "CORSSettings",
    "ProblemDetail",
    "RequestIdMiddleware",
    "compose_lifespan",
    "create_app",
    "get_request_id",
    "register_exception_handlers",
]
