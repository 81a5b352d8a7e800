"""Application settings using Pydantic Settings for typed configuration.

This module centralizes all configuration and provides type-safe access to settings.
Settings are loaded from environment variables (or a .env file) once per process
and are immutable afterwards.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # Environment
    env_name: str = Field(default="development", alias="ENV_NAME")

    # Database
    database_url: str = Field(default="sqlite:///./fitback.db", alias="DATABASE_URL")

    # Session tokens
    jwt_secret_key: str = Field(alias="JWT_SECRET_KEY", min_length=1)
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_expires_seconds: int = Field(
        default=3600, alias="SESSION_EXPIRES_SECONDS", ge=60, le=86400
    )

    # Credentials
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS", ge=4, le=15)

    # Public base URL used in verification links
    server_url: str = Field(default="http://localhost:5000", alias="SERVER_URL")

    # CORS
    cors_origins: str = Field(default="http://localhost:5173", alias="CORS_ORIGINS")

    # Email (Resend)
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    app_domain: str = Field(default="resend.dev", alias="APP_DOMAIN")
    mail_from_name: str = Field(default="FitBack", alias="MAIL_FROM_NAME")

    # GitHub OAuth
    github_client_id: str | None = Field(default=None, alias="GITHUB_CLIENT_ID")
    github_client_secret: str | None = Field(default=None, alias="GITHUB_CLIENT_SECRET")

    # Serving / supervisor
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT", ge=0, le=65535)
    workers: int | None = Field(default=None, alias="WEB_CONCURRENCY", ge=1)
    supervisor_backoff_base: float = Field(
        default=0.5, alias="SUPERVISOR_BACKOFF_BASE", gt=0
    )
    supervisor_backoff_max: float = Field(
        default=30.0, alias="SUPERVISOR_BACKOFF_MAX", gt=0
    )
    supervisor_max_restarts: int = Field(
        default=10, alias="SUPERVISOR_MAX_RESTARTS", ge=1
    )
    supervisor_restart_window: float = Field(
        default=60.0, alias="SUPERVISOR_RESTART_WINDOW", gt=0
    )

    # Heavy computation demo
    compute_max_workers: int = Field(default=1, alias="COMPUTE_MAX_WORKERS", ge=1)
    compute_max_pending: int = Field(default=4, alias="COMPUTE_MAX_PENDING", ge=1)
    heavy_task_iterations: int = Field(
        default=100_000_000, alias="HEAVY_TASK_ITERATIONS", ge=0
    )

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        origins = []
        for o in self.cors_origins.split(","):
            trimmed = o.strip()
            if trimmed:
                origins.append(trimmed)
        return origins

    @computed_field
    @property
    def session_expires_in(self) -> timedelta:
        """Get session token lifetime as timedelta."""
        return timedelta(seconds=self.session_expires_seconds)

    @computed_field
    @property
    def verification_base_url(self) -> str:
        """Base URL that verification tokens are appended to."""
        return f"{self.server_url.rstrip('/')}/api/public/emailverify"

    @computed_field
    @property
    def mail_from(self) -> str:
        """Sender address for outbound mail."""
        return f"{self.mail_from_name} <noreply@{self.app_domain}>"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.
    """
    return Settings()
