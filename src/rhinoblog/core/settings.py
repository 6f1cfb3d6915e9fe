"""Application settings and configuration.

This module defines all configuration options for the rhinoblog application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Rhinoplasty Blogs", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./rhinoblog.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    # Create tables and seed defaults when the app starts.
    bootstrap_on_startup: bool = Field(default=True, alias="BOOTSTRAP_ON_STARTUP")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Publishing gate
    trust_publish_threshold: int = Field(default=50, alias="TRUST_PUBLISH_THRESHOLD")

    # Seed administrator created on first startup (skipped without a password)
    seed_admin_username: str = Field(default="admin", alias="SEED_ADMIN_USERNAME")
    seed_admin_password: str | None = Field(default=None, alias="SEED_ADMIN_PASSWORD")
    seed_admin_email: str | None = Field(
        default="admin@rhinoplastyblogs.com",
        alias="SEED_ADMIN_EMAIL",
    )

    # External text-generation service (OpenAI-compatible chat completions)
    generation_api_key: str | None = Field(default=None, alias="GENERATION_API_KEY")
    generation_base_url: str = Field(
        default="https://api.openai.com/v1",
        alias="GENERATION_BASE_URL",
    )
    generation_model: str = Field(default="gpt-4o", alias="GENERATION_MODEL")
    generation_temperature: float = Field(default=0.7, alias="GENERATION_TEMPERATURE")
    generation_timeout_seconds: float = Field(
        default=120.0,
        alias="GENERATION_TIMEOUT_SECONDS",
    )
    batch_generation_delay_seconds: float = Field(
        default=2.0,
        alias="BATCH_GENERATION_DELAY_SECONDS",
    )

    # Scheduled generation
    schedule_enabled: bool = Field(default=False, alias="SCHEDULE_ENABLED")
    schedule_cron: str = Field(default="0 12 * * *", alias="SCHEDULE_CRON")
    schedule_poll_interval_seconds: float = Field(
        default=60.0,
        alias="SCHEDULE_POLL_INTERVAL_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def generation_configured(self) -> bool:
        """Return True when an API key for the generation service is present."""
        return bool(self.generation_api_key)


settings = Settings()  # type: ignore[call-arg]
