"""RFC 7807 Problem Details exception handlers for FastAPI.

Translates domain exceptions into ``application/problem+json`` responses:

    AuthenticationError (and subclasses) -> 401 + WWW-Authenticate
    NotFoundError -> 404
    ConflictError -> 409
    ValidationError / RequestValidationError -> 422
    DomainError (fallback) -> 400
    HashingFailureError / ConfigurationError / Exception -> 500
    PersistenceError -> 503

Response bodies never carry password, hash or token material: sensitive
context keys are dropped and sensitive patterns in strings are redacted.

Usage:
    from clipspace.infra.fastapi.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from clipspace.foundation.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    DomainError,
    HashingFailureError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from clipspace.infra.fastapi.middleware.request_id import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response model.

    Standard fields: type, title, status, detail, instance.
    Extension fields: error_code (machine-readable), context (structured,
    sanitized) and correlation_id (5xx only).
    """

    type: str = Field(
        ...,
        description="URI reference identifying problem type",
        examples=["/errors/invalid-token", "/errors/validation-error"],
    )
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., ge=400, le=599, description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str | None = Field(
        default=None,
        description="URI reference to specific occurrence (request path)",
    )
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code",
        examples=["INVALID_TOKEN", "INVALID_CREDENTIALS", "CONFLICT"],
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Structured debugging information",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for support requests",
    )


_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "old_password",
        "new_password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "credential",
        "credential_hash",
        "authorization",
        "cookie",
    }
)

_SENSITIVE_PATTERNS = [
    (
        re.compile(r"postgres(?:ql)?(?:\+\w+)?://[^@\s]*@[^/\s]*"),
        "postgresql://[REDACTED]@[REDACTED]",
    ),
    (
        re.compile(r"password\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "password=[REDACTED]",
    ),
    (
        re.compile(r"secret\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "secret=[REDACTED]",
    ),
    (
        re.compile(r"token\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "token=[REDACTED]",
    ),
    (re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+"), "Bearer [REDACTED]"),
    (re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"), "[REDACTED_HASH]"),
]


def _create_problem_response(
    problem: ProblemDetail,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


def _get_correlation_id() -> str:
    """Request ID set by RequestIdMiddleware, or "unknown" outside a request."""
    return get_request_id() or "unknown"


def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any] | None:
    """Make exception context safe to return to the client.

    Drops sensitive keys, redacts sensitive patterns in strings and converts
    UUIDs and datetimes to strings.
    """
    if not context:
        return None

    sanitized = {
        key: _sanitize_value(value)
        for key, value in context.items()
        if not _is_sensitive_key(key)
    }
    return sanitized or None


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return lowered in _SENSITIVE_KEYS or lowered.endswith(("_password", "_token", "_secret"))


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return _redact_sensitive_strings(value)
    if isinstance(value, dict):
        return _sanitize_context(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(v) for v in value]
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def _redact_sensitive_strings(text: str) -> str:
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


async def authentication_error_handler(
    request: Request,
    exc: AuthenticationError,
) -> JSONResponse:
    """Translate AuthenticationError to 401 with a WWW-Authenticate header.

    Covers invalid credentials, invalid or stale tokens and guard rejections.
    The detail is the exception's public message only; internal rejection
    reasons stay in the logs.
    """
    problem = ProblemDetail(
        type=f"/errors/{exc.error_code.lower().replace('_', '-')}",
        title="Unauthorized",
        status=401,
        detail=exc.message,
        instance=str(request.url.path),
        error_code=exc.error_code,
    )
    return _create_problem_response(
        problem,
        headers={"WWW-Authenticate": f'Bearer realm="API", error="{exc.auth_error}"'},
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    problem = ProblemDetail(
        type="/errors/not-found",
        title="Resource Not Found",
        status=404,
        detail=_redact_sensitive_strings(exc.message),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def validation_error_handler(
    request: Request,
    exc: ValidationError,
) -> JSONResponse:
    """Translate ValidationError to 422 with the failing field in context."""
    problem = ProblemDetail(
        type="/errors/validation-error",
        title="Validation Error",
        status=422,
        detail=_redact_sensitive_strings(exc.message),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def conflict_error_handler(
    request: Request,
    exc: ConflictError,
) -> JSONResponse:
    problem = ProblemDetail(
        type="/errors/conflict",
        title="Conflict",
        status=409,
        detail=exc.message,
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def persistence_error_handler(
    request: Request,
    exc: PersistenceError,
) -> JSONResponse:
    """Translate PersistenceError to 503.

    A store outage is reported as unavailability, never as an auth failure,
    so clients retry instead of discarding their session.
    """
    correlation_id = _get_correlation_id()
    logger.error(
        "persistence_unavailable",
        extra={
            "correlation_id": correlation_id,
            "operation": exc.operation,
            "path": str(request.url.path),
        },
    )
    problem = ProblemDetail(
        type="/errors/service-unavailable",
        title="Service Unavailable",
        status=503,
        detail="Account store temporarily unavailable",
        instance=str(request.url.path),
        error_code=exc.error_code,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem, headers={"Retry-After": "5"})


async def internal_domain_error_handler(
    request: Request,
    exc: DomainError,
) -> JSONResponse:
    """Translate HashingFailureError and ConfigurationError to 500.

    Both indicate a broken deployment or corrupted data rather than a bad
    request; the message stays in the logs.
    """
    correlation_id = _get_correlation_id()
    logger.error(
        "internal_domain_error",
        extra={
            "correlation_id": correlation_id,
            "error_code": exc.error_code,
            "path": str(request.url.path),
        },
    )
    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail="An internal error occurred. Please contact support with the correlation ID.",
        instance=str(request.url.path),
        error_code=exc.error_code,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


async def domain_error_handler(
    request: Request,
    exc: DomainError,
) -> JSONResponse:
    """Fallback for domain errors without a more specific handler: 400."""
    problem = ProblemDetail(
        type="/errors/domain-error",
        title="Bad Request",
        status=400,
        detail=_redact_sensitive_strings(exc.message),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate FastAPI request validation failures to 422.

    Only location, message and type are echoed; the rejected input values are
    omitted because they may contain passwords.
    """
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]

    problem = ProblemDetail(
        type="/errors/request-validation-error",
        title="Request Validation Error",
        status=422,
        detail="Request validation failed",
        instance=str(request.url.path),
        error_code="REQUEST_VALIDATION_ERROR",
        context={"errors": errors},
    )
    return _create_problem_response(problem)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all: log the full exception, return a sanitized 500.

    In debug mode the exception type and message are included.
    """
    correlation_id = _get_correlation_id()

    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    if getattr(request.app, "debug", False):
        detail = _redact_sensitive_strings(f"{type(exc).__name__}: {exc}")
        context: dict[str, Any] | None = {"exception_type": type(exc).__name__}
    else:
        detail = "An internal error occurred. Please contact support with the correlation ID."
        context = None

    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=detail,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        context=context,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on a FastAPI application.

    Starlette resolves handlers along the exception's MRO, so the subclass
    handlers win over the DomainError fallback regardless of order.
    Discovered through the ``clipspace.error_handlers`` entry point group.
    """
    # Starlette's handler typing is stricter than the per-exception handlers.
    app.add_exception_handler(
        AuthenticationError,
        authentication_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        NotFoundError,
        not_found_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        ValidationError,
        validation_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        ConflictError,
        conflict_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        PersistenceError,
        persistence_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        HashingFailureError,
        internal_domain_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        ConfigurationError,
        internal_domain_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        DomainError,
        domain_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
