"""Authentication configuration settings.

Loaded from environment variables with AUTH_ prefix.
Follows Pydantic BaseSettings pattern for type-safe configuration.

Environment Variables:
    AUTH_ACCESS_TOKEN_SECRET: HMAC secret for access tokens (required)
    AUTH_ACCESS_TOKEN_TTL: Access token lifetime in seconds
    AUTH_REFRESH_TOKEN_SECRET: HMAC secret for refresh tokens (required)
    AUTH_REFRESH_TOKEN_TTL: Refresh token lifetime in seconds
    AUTH_TOKEN_ISSUER: Value of the 'iss' claim
    AUTH_BCRYPT_ROUNDS: bcrypt cost factor
    AUTH_COOKIE_SECURE: Set the Secure flag on session cookies
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clipspace.foundation.domain.exceptions import ConfigurationError
from clipspace.infra.auth.token_signer import TokenSignerConfig

MIN_SECRET_LENGTH = 32


class AuthSettings(BaseSettings):
    """Authentication configuration loaded from environment variables.

    Both secrets are required and have no default, so a deployment that
    forgets them fails at startup instead of signing with a guessable key.

    Example:
        >>> settings = AuthSettings(
        ...     access_token_secret="a" * 32,
        ...     refresh_token_secret="r" * 32,
        ... )
        >>> settings.access_token_ttl
        900
        >>> settings.token_issuer
        'clipspace'
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    access_token_secret: SecretStr = Field(
        description="HMAC secret for access tokens",
    )
    access_token_ttl: int = Field(
        default=900,
        ge=60,
        le=86400,
        description="Access token lifetime in seconds",
    )
    refresh_token_secret: SecretStr = Field(
        description="HMAC secret for refresh tokens",
    )
    refresh_token_ttl: int = Field(
        default=864000,
        ge=3600,
        le=7776000,
        description="Refresh token lifetime in seconds",
    )
    token_issuer: str = Field(
        default="clipspace",
        min_length=1,
        description="Value of the 'iss' claim",
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=10,
        le=16,
        description="bcrypt cost factor",
    )
    cookie_secure: bool = Field(
        default=True,
        description="Set the Secure flag on session cookies (disable only for local HTTP)",
    )

    @field_validator("access_token_secret", "refresh_token_secret")
    @classmethod
    def _secret_long_enough(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value()) < MIN_SECRET_LENGTH:
            msg = f"must be at least {MIN_SECRET_LENGTH} characters"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _secrets_differ(self) -> AuthSettings:
        if self.access_token_secret.get_secret_value() == (
            self.refresh_token_secret.get_secret_value()
        ):
            raise ValueError("AUTH_ACCESS_TOKEN_SECRET and AUTH_REFRESH_TOKEN_SECRET must differ")
        return self

    def to_signer_config(self) -> TokenSignerConfig:
        """Build the immutable signing configuration."""
        return TokenSignerConfig(
            access_secret=self.access_token_secret.get_secret_value(),
            refresh_secret=self.refresh_token_secret.get_secret_value(),
            access_ttl=timedelta(seconds=self.access_token_ttl),
            refresh_ttl=timedelta(seconds=self.refresh_token_ttl),
            issuer=self.token_issuer,
        )


def load_auth_settings(**overrides: object) -> AuthSettings:
    """Load AuthSettings, turning validation failures into ConfigurationError.

    Args:
        **overrides: Passed to the AuthSettings constructor (tests, scripts).

    Raises:
        ConfigurationError: If a required value is missing or invalid. The
            message names the offending fields but never their values.
    """
    try:
        return AuthSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) or "settings" for err in exc.errors()})
        raise ConfigurationError(
            "Invalid authentication configuration",
            context={"fields": ", ".join(fields)},
        ) from None


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get singleton AuthSettings instance.

    Cached for performance - settings are loaded once per application lifecycle.
    Clear cache with ``get_auth_settings.cache_clear()`` for testing.

    Raises:
        ConfigurationError: If the environment does not hold a valid configuration.
    """
    return load_auth_settings()
