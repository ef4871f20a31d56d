# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the Academia API.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from academia.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRETS = {
    "Head": "change-this-head-secret",
    "Management": "change-this-management-secret",
    "Teacher": "change-this-teacher-secret",
    "Student": "change-this-student-secret",
}


class DatabaseSettings(BaseSettings):
    """MongoDB configuration shared by every tenant database.

    Each school gets its own database named after its school code. All
    tenant databases live on the same cluster and use the same credentials.
    The central database holds the school code registry.

    Attributes:
        username: MongoDB username shared by all tenants.
        password: MongoDB password shared by all tenants.
        host: Cluster host (SRV record host for mongodb+srv).
        scheme: URI scheme, "mongodb+srv" for Atlas or "mongodb" for a plain host.
        options: Query string appended to every connection URI.
        central_database: Database holding platform-wide collections.
        connect_timeout_seconds: Upper bound on opening a tenant connection.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    username: str = "academia"
    password: SecretStr = SecretStr("academia_password")
    host: str = "localhost:27017"
    scheme: Literal["mongodb", "mongodb+srv"] = "mongodb"
    options: str = "retryWrites=true&w=majority"
    central_database: str = "academia_central"
    connect_timeout_seconds: float = 10.0

    def tenant_uri(self, database: str) -> str:
        """Build the connection URI scoped to one database.

        Args:
            database: Database name (the tenant's school code).

        Returns:
            MongoDB connection URI with URL-quoted credentials.
        """
        user = quote_plus(self.username)
        pwd = quote_plus(self.password.get_secret_value())
        uri = f"{self.scheme}://{user}:{pwd}@{self.host}/{database}"
        if self.options:
            uri = f"{uri}?{self.options}"
        return uri


class JWTSettings(BaseSettings):
    """JWT session token configuration.

    Every role signs with its own secret, so a token issued for one role
    never validates for another.

    Attributes:
        secret_head: Signing secret for Head tokens.
        secret_management: Signing secret for Management tokens.
        secret_teacher: Signing secret for Teacher tokens.
        secret_student: Signing secret for Student tokens.
        algorithm: JWT signing algorithm.
        expire_days: Session token lifetime in days.
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
    )

    secret_head: SecretStr = SecretStr(DEFAULT_JWT_SECRETS["Head"])
    secret_management: SecretStr = SecretStr(DEFAULT_JWT_SECRETS["Management"])
    secret_teacher: SecretStr = SecretStr(DEFAULT_JWT_SECRETS["Teacher"])
    secret_student: SecretStr = SecretStr(DEFAULT_JWT_SECRETS["Student"])
    algorithm: str = "HS256"
    expire_days: int = 25

    def secret_for(self, role: str) -> str:
        """Get the signing secret for a role.

        Args:
            role: Role name (Head, Management, Teacher, Student).

        Returns:
            The plain secret value.

        Raises:
            KeyError: If the role has no configured secret.
        """
        secrets = {
            "Head": self.secret_head,
            "Management": self.secret_management,
            "Teacher": self.secret_teacher,
            "Student": self.secret_student,
        }
        return secrets[str(role)].get_secret_value()


class CookieSettings(BaseSettings):
    """Session cookie configuration.

    The cookie lifetime is independent of the token lifetime.

    Attributes:
        max_age_days: Cookie max-age in days.
        path: Cookie path.
    """

    model_config = SettingsConfigDict(
        env_prefix="COOKIE_",
        extra="ignore",
    )

    max_age_days: int = 7
    path: str = "/"

    @property
    def max_age_seconds(self) -> int:
        """Cookie max-age in seconds."""
        return self.max_age_days * 24 * 60 * 60


class AuthSettings(BaseSettings):
    """Authentication tuning.

    Attributes:
        bcrypt_rounds: Cost factor for new password hashes.
        verify_timeout_seconds: Upper bound on verifying a session.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        extra="ignore",
    )

    bcrypt_rounds: int = 12
    verify_timeout_seconds: float = 5.0


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration.

    Attributes:
        requests_per_minute: Maximum requests per minute per client.
    """

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        extra="ignore",
    )

    requests_per_minute: int = 100


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = (
        "https://academia-front-end.vercel.app,http://localhost:3000,http://localhost:5173"
    )
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: MongoDB settings.
        jwt: JWT session token settings.
        cookie: Session cookie settings.
        auth: Authentication tuning.
        rate_limit: Rate limiting settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    cookie: CookieSettings = Field(default_factory=CookieSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            secrets = {role: self.jwt.secret_for(role) for role in DEFAULT_JWT_SECRETS}
            for role, secret in secrets.items():
                if secret == DEFAULT_JWT_SECRETS[role]:
                    raise ValueError(
                        f"JWT secret for {role} must be changed from default in production. "
                        f"Set JWT_SECRET_{role.upper()} environment variable."
                    )
            if len(set(secrets.values())) != len(secrets):
                raise ValueError("Each role must have a distinct JWT secret in production.")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
