"""Clipspace Foundation Application -- session orchestration and app wiring primitives."""

from clipspace.foundation.application.context import (
    NoRequestContextError,
    clear_principal_context,
    get_current_principal,
    get_optional_principal,
    set_principal_context,
)
from clipspace.foundation.application.contributions import (
    LIFESPAN_PRIORITY_AUTH,
    LIFESPAN_PRIORITY_OBSERVABILITY,
    LIFESPAN_PRIORITY_PERSISTENCE,
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
)
from clipspace.foundation.application.discovery import (
    ContributionGroup,
    DiscoveredContribution,
    discover,
)
from clipspace.foundation.application.registration import AccountRegistrar
from clipspace.foundation.application.session_manager import SessionGrant, SessionManager

__all__ = [
    "LIFESPAN_PRIORITY_AUTH",
    "LIFESPAN_PRIORITY_OBSERVABILITY",
    "LIFESPAN_PRIORITY_PERSISTENCE",
    "AccountRegistrar",
    "ContributionGroup",
    "DiscoveredContribution",
    "ErrorHandlerContribution",
    "LifespanContribution",
    "MiddlewareContribution",
    "NoRequestContextError",
    "SessionGrant",
    "SessionManager",
    "clear_principal_context",
    "discover",
    "get_current_principal",
    "get_optional_principal",
    "set_principal_context",
]
