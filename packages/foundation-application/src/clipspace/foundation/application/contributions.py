"""What a Clipspace package can plug into the assembled application.

Each package advertises these objects under the ``clipspace.*`` entry-point
groups; ``create_app`` collects them at startup. Nothing here imports a web
framework, so domain-side packages can declare contributions too.

Middleware ordering used in this project (lower wraps outer):
  10   request id, so every log line and error body carries one
  150  access-token guard
  CORS is added by the app factory itself and always sits innermost.

Lifespan ordering (lower starts first, stops last):
  50   structured logging
  75   database engine or in-memory account store
  100  token signer and guard, which need the account store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MIDDLEWARE_PRIORITY_MIN = 0
MIDDLEWARE_PRIORITY_MAX = 499

LIFESPAN_PRIORITY_OBSERVABILITY = 50
LIFESPAN_PRIORITY_PERSISTENCE = 75
LIFESPAN_PRIORITY_AUTH = 100


@dataclass(frozen=True, slots=True)
class MiddlewareContribution:
    """A middleware class plus where it sits in the stack.

    ``priority`` must fall in [0, 499]; anything that does not declare one
    lands at 400, inside the guard. ``kwargs`` go straight to
    ``app.add_middleware``.
    """

    middleware_class: type[Any]
    priority: int = 400
    kwargs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not MIDDLEWARE_PRIORITY_MIN <= self.priority <= MIDDLEWARE_PRIORITY_MAX:
            msg = (
                f"Middleware priority must be between {MIDDLEWARE_PRIORITY_MIN} "
                f"and {MIDDLEWARE_PRIORITY_MAX}, got {self.priority}"
            )
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ErrorHandlerContribution:
    """Maps one exception type to an async ``(request, exc)`` handler."""

    exception_class: type[BaseException]
    handler: Any


@dataclass(frozen=True, slots=True)
class LifespanContribution:
    """Startup/shutdown hook: ``hook(app)`` returns an async context manager."""

    hook: Any
    priority: int = 500
