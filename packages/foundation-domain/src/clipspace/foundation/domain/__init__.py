"""Clipspace Foundation Domain -- pure Python domain primitives.

This package provides the foundational domain building blocks for the
account and session core: exceptions, account value objects, the account
record and principal view, token types, and port interfaces.
"""

from clipspace.foundation.domain.account_value_objects import (
    Email,
    FullName,
    Username,
    normalize_identifier,
)
from clipspace.foundation.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    DomainError,
    HashingFailureError,
    InvalidCredentialError,
    InvalidTokenError,
    NotFoundError,
    PersistenceError,
    PrincipalNotFoundError,
    StaleTokenError,
    UnauthorizedError,
    ValidationError,
)
from clipspace.foundation.domain.ports import (
    AccountRepositoryPort,
    CredentialHasherPort,
    SessionStorePort,
    TokenSignerPort,
)
from clipspace.foundation.domain.principal import AccountRecord, Principal
from clipspace.foundation.domain.tokens import (
    SessionState,
    TokenClaims,
    TokenPair,
    TokenPurpose,
)

__all__ = [
    "AccountRecord",
    "AccountRepositoryPort",
    "AuthenticationError",
    "ConfigurationError",
    "ConflictError",
    "CredentialHasherPort",
    "DomainError",
    "Email",
    "FullName",
    "HashingFailureError",
    "InvalidCredentialError",
    "InvalidTokenError",
    "NotFoundError",
    "PersistenceError",
    "Principal",
    "PrincipalNotFoundError",
    "SessionState",
    "SessionStorePort",
    "StaleTokenError",
    "TokenClaims",
    "TokenPair",
    "TokenPurpose",
    "TokenSignerPort",
    "UnauthorizedError",
    "Username",
    "ValidationError",
    "normalize_identifier",
]
