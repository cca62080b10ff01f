"""Domain exception hierarchy for type-safe error handling.

This module provides the base exception hierarchy for all domain errors.
Exceptions include structured error codes and context for consistent
API error handling and logging.

The authentication kinds (invalid credential, invalid token, stale token,
unauthorized) all derive from :class:`AuthenticationError` so the HTTP layer
can render them uniformly as 401. Token errors additionally carry an internal
``reason`` used only for logging; it never reaches the response body.

Example:
    >>> from clipspace.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("Account", "550e8400-e29b-41d4-a716-446655440000")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ConflictError",
    "DomainError",
    "HashingFailureError",
    "InvalidCredentialError",
    "InvalidTokenError",
    "NotFoundError",
    "PersistenceError",
    "PrincipalNotFoundError",
    "StaleTokenError",
    "UnauthorizedError",
    "ValidationError",
]

# Shared public wording for every token rejection. Callers must not be able
# to tell an expired token from a forged or rotated one.
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class DomainError(Exception):
    """Base class for all domain errors.

    Provides error code and structured context for debugging. All domain
    exceptions inherit from this class to enable consistent API error
    handling and logging.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (account IDs, field names).

    Example:
        >>> raise DomainError("Operation failed", context={"account_id": "123"})
        DomainError: Operation failed (account_id=123)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
                     Values are typically strings, UUIDs, or primitive types.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        error_code: "RESOURCE_NOT_FOUND" (class constant).
        resource_type: Type of missing resource.
        resource_id: Identifier of missing resource.

    Example:
        >>> raise NotFoundError("Account", "alice")
        NotFoundError: Account not found: alice
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "Account").
            resource_id: Identifier of missing resource. UUID is converted to string.
            **extra_context: Additional debugging context.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class PrincipalNotFoundError(NotFoundError):
    """Raised when no account matches an identifier or token subject.

    Maps to HTTP 404 when raised outside an authentication flow. The auth
    router translates it to a uniform 401 on login and refresh so that
    account existence is not disclosed.

    Example:
        >>> raise PrincipalNotFoundError("alice")
        PrincipalNotFoundError: Principal not found: alice
    """

    error_code: str = "PRINCIPAL_NOT_FOUND"

    def __init__(self, lookup: UUID | str, **extra_context: Any) -> None:
        super().__init__("Principal", lookup, **extra_context)


class ValidationError(DomainError):
    """Raised when input fails domain validation rules.

    Maps to HTTP 422 Unprocessable Entity. Use for domain rule violations
    on command input, not for Pydantic schema validation.

    Attributes:
        error_code: "VALIDATION_ERROR" (class constant).
        field: Field path that failed validation.
        reason: Human-readable validation failure reason.

    Example:
        >>> raise ValidationError("username", "Username cannot be empty")
        ValidationError: Validation failed for 'username': Username cannot be empty
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field that failed validation.
            reason: Human-readable validation failure reason.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class ConflictError(DomainError):
    """Raised when operation conflicts with current system state.

    Maps to HTTP 409 Conflict. Used for duplicate account registration.

    Attributes:
        error_code: "CONFLICT" (class constant).
        reason: Description of the conflict.

    Example:
        >>> raise ConflictError("Username or email already registered", field="username")
        ConflictError: Conflict: Username or email already registered (field=username)
    """

    error_code: str = "CONFLICT"

    def __init__(
        self,
        reason: str,
        **context: Any,
    ) -> None:
        """Initialize conflict error.

        Args:
            reason: Description of conflict.
            **context: Additional debugging context.
        """
        self.reason = reason
        message = f"Conflict: {reason}"
        super().__init__(message, context)


class AuthenticationError(DomainError):
    """Raised when authentication fails (missing, expired, invalid token).

    Maps to HTTP 401 Unauthorized. All 401 responses MUST include
    WWW-Authenticate header per RFC 6750.

    Attributes:
        error_code: Machine-readable error code (e.g., "MISSING_TOKEN").
        auth_error: RFC 6750 error code for WWW-Authenticate header.

    Example:
        >>> raise AuthenticationError("Token has expired", auth_error="invalid_token",
        ...     error_code="TOKEN_EXPIRED")
    """

    error_code: str = "AUTHENTICATION_ERROR"

    def __init__(
        self,
        message: str,
        auth_error: str = "invalid_token",
        error_code: str = "AUTHENTICATION_ERROR",
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize authentication error.

        Args:
            message: Human-readable error description.
            auth_error: RFC 6750 error code for WWW-Authenticate header.
            error_code: Machine-readable error code for client handling.
            context: Structured debugging information.
        """
        self.auth_error = auth_error
        self.error_code = error_code
        super().__init__(message, context)


class InvalidCredentialError(AuthenticationError):
    """Raised when a password does not match the stored credential hash."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid credentials",
            auth_error="invalid_request",
            error_code="INVALID_CREDENTIALS",
        )


class InvalidTokenError(AuthenticationError):
    """Raised when a token is malformed, badly signed, expired or of the wrong kind.

    The public message is the same for every cause. The specific cause is
    kept on ``reason`` for logging only.

    Attributes:
        reason: Internal cause, one of ``missing``, ``malformed``,
            ``bad_signature``, ``expired``, ``algorithm_mismatch``,
            ``wrong_purpose``, ``missing_claim``, ``invalid_claims``.

    Example:
        >>> err = InvalidTokenError("expired")
        >>> str(err)
        'Invalid or expired token'
        >>> err.reason
        'expired'
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(INVALID_TOKEN_MESSAGE, error_code="INVALID_TOKEN")


class StaleTokenError(AuthenticationError):
    """Raised when a correctly signed refresh token is not the stored one.

    Happens after a rotation or a logout: the token verifies, but the
    session it belonged to has moved on. Rendered exactly like
    :class:`InvalidTokenError`.
    """

    reason = "stale"

    def __init__(self) -> None:
        super().__init__(INVALID_TOKEN_MESSAGE, error_code="INVALID_TOKEN")


class UnauthorizedError(AuthenticationError):
    """Guard-level rejection of a request.

    Raised by the request guard for every failure (missing token, invalid
    token, vanished principal) so protected handlers never see the cause.

    Attributes:
        reason: Internal cause for logging.
    """

    def __init__(self, reason: str = "unauthorized") -> None:
        self.reason = reason
        super().__init__("Unauthorized request", error_code="UNAUTHORIZED")


class HashingFailureError(DomainError):
    """Raised when the password hashing primitive itself errors.

    A wrong password is never a hashing failure; this covers malformed
    stored hashes and invalid input to the primitive. Maps to HTTP 500.
    """

    error_code: str = "HASHING_FAILURE"

    def __init__(self, message: str = "Credential hashing failed", **context: Any) -> None:
        super().__init__(message, context)


class PersistenceError(DomainError):
    """Raised when the account store fails to read or write.

    Maps to HTTP 503 Service Unavailable. Never masked as an auth failure.

    Example:
        >>> raise PersistenceError("set_refresh_token", account_id="42")
        PersistenceError: Persistence operation failed: set_refresh_token (account_id=42)
    """

    error_code: str = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, **context: Any) -> None:
        self.operation = operation
        super().__init__(f"Persistence operation failed: {operation}", context)


class ConfigurationError(DomainError):
    """Raised at startup when required configuration is missing or invalid."""

    error_code: str = "CONFIGURATION_ERROR"
