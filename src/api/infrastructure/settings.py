"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TASKS_DB_HOST: Database host (default: localhost)
        TASKS_DB_PORT: Database port (default: 5432)
        TASKS_DB_DATABASE: Database name (default: tasks)
        TASKS_DB_USERNAME: Database user (default: tasks)
        TASKS_DB_PASSWORD: Database password (required in production)
        TASKS_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        TASKS_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        TASKS_DB_CREATE_SCHEMA: Create missing tables on startup (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKS_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tasks", description="Database name")
    username: str = Field(default="tasks", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    create_schema: bool = Field(
        default=False,
        description="Create missing tables on application startup",
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self


class OIDCSettings(BaseSettings):
    """Identity provider settings shared by the API and the web client.

    Environment variables:
        TASKS_OIDC_URL: Identity provider base URL (default: http://localhost:8080)
        TASKS_OIDC_REALM: Realm name (default: contrack)
        TASKS_OIDC_CLIENT_ID: Application (client) id (default: contrackapi)
        TASKS_OIDC_AUDIENCE: Expected audience claim (default: account)
        TASKS_OIDC_USER_ID_CLAIM: Claim holding the user id (default: sub)
        TASKS_OIDC_USERNAME_CLAIM: Claim holding the username (default: preferred_username)
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKS_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:8080",
        description="Identity provider base URL",
    )
    realm: str = Field(default="contrack", description="Identity provider realm")
    client_id: str = Field(default="contrackapi", description="Client id")
    audience: str = Field(default="account", description="Expected audience")
    user_id_claim: str = Field(default="sub", description="User id claim")
    username_claim: str = Field(
        default="preferred_username",
        description="Username claim",
    )

    @property
    def issuer_url(self) -> str:
        """Realm issuer URL, used as the OIDC discovery base."""
        return f"{self.url.rstrip('/')}/realms/{self.realm}"


class WebClientSettings(BaseSettings):
    """Settings for the web client session layer.

    Environment variables:
        TASKS_WEB_API_BASE_URL: Base URL of the tasks API (default: http://localhost:9999)
        TASKS_WEB_APP_ORIGIN: Origin the application is served from (default: http://localhost:5173)
        TASKS_WEB_CREATE_DELAY_SECONDS: Pause before creating a task (default: 1.0)
        TASKS_WEB_REQUEST_TIMEOUT_SECONDS: HTTP timeout (default: 10.0)
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKS_WEB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = Field(
        default="http://localhost:9999",
        description="Base URL of the tasks API",
    )
    app_origin: str = Field(
        default="http://localhost:5173",
        description="Origin the application is served from",
    )
    create_delay_seconds: float = Field(
        default=1.0,
        description="Pause before a task create request is sent",
        ge=0,
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for API and identity provider requests",
        gt=0,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Tasks API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="info", description="Minimum log level")
    log_format: Literal["auto", "console", "json"] = Field(
        default="auto", description="Log renderer: console, json, or auto by TTY"
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def oidc(self) -> OIDCSettings:
        """Get identity provider settings."""
        return get_oidc_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached identity provider settings."""
    return OIDCSettings()


@lru_cache
def get_web_client_settings() -> WebClientSettings:
    """Get cached web client settings."""
    return WebClientSettings()
