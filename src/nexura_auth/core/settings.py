"""Application settings and configuration.

This module defines all configuration options for the Nexura auth service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Nexura Auth", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./nexura_auth.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    db_pool_size: int = Field(default=5, alias="DB_POOL_SIZE")

    # Challenge storage: "database" or "redis"
    challenge_backend: str = Field(default="database", alias="CHALLENGE_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Wallet login settings
    login_message_title: str = Field(default="Nexura Wallet Login", alias="LOGIN_MESSAGE_TITLE")
    challenge_ttl_seconds: int = Field(default=300, alias="CHALLENGE_TTL_SECONDS")
    session_ttl_seconds: int = Field(default=7 * 24 * 60 * 60, alias="SESSION_TTL_SECONDS")

    # Headers that try to assert an identity without proof; requests carrying them are refused.
    identity_assertion_headers: list[str] = Field(
        default=["x-wallet-address"],
        alias="IDENTITY_ASSERTION_HEADERS",
    )

    # Background purge of expired challenge/session rows (0 disables)
    cleanup_interval_seconds: float = Field(default=0.0, alias="CLEANUP_INTERVAL_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
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
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
