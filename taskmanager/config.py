"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.

Core components never read the global ``settings`` directly: the token issuer
and the task query engine receive the small config objects built by
``Settings.token_config()`` and ``Settings.task_query_config()``.
"""


import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskmanager.utils.logger import setup_logger

load_dotenv(override=True)


logger = setup_logger("core_config")

DEV_SECRET_KEY = "your-secret-key-change-this-in-production"


class TokenConfig(BaseModel):
    """Signing parameters for access tokens."""

    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = Field(default=1440, gt=0)


class TaskQueryConfig(BaseModel):
    """Defaults and limits applied by the task query engine."""

    default_sort_field: str = "duedate"
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        # Allow override from environment variables
        env_prefix="",
    )

    # ===== Database Configuration =====
    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description="Async SQLAlchemy URL of the application database",
    )

    database_schema: str | None = Field(
        default=None,
        alias="DATABASE_SCHEMA",
        description="Optional database schema holding the users and tasks tables",
    )

    # ===== Authentication Configuration =====
    secret_key: str = Field(
        default=DEV_SECRET_KEY,
        alias="SECRET_KEY",
        description="Symmetric key used to sign access tokens",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        alias="JWT_ALGORITHM",
        description="HMAC algorithm used to sign access tokens",
    )

    access_token_expire_minutes: int = Field(
        default=1440,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Access token lifetime in minutes (24 hours default)",
    )

    # ===== Task Query Configuration =====
    default_sort_field: str = Field(
        default="duedate",
        alias="DEFAULT_SORT_FIELD",
        description="Sort field used when a listing request names none",
    )

    default_page_size: int = Field(
        default=10, alias="DEFAULT_PAGE_SIZE", description="Default tasks per page"
    )

    max_page_size: int = Field(
        default=100, alias="MAX_PAGE_SIZE", description="Upper bound on tasks per page"
    )

    # ===== Server Configuration =====
    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=8080, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",  # Vite dev server default port
            "http://localhost:3000",  # Alternative dev port
            "http://127.0.0.1:5173",  # Local IP variant
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS allowed origins",
    )

    cors_allow_credentials: bool = Field(
        default=True,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Whether to allow credentials in CORS requests",
    )

    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_METHODS",
        description="CORS allowed methods",
    )

    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_HEADERS",
        description="CORS allowed headers",
    )

    # User-facing hint for database connection errors
    db_unavailable_hint: str = os.getenv(
        "DB_UNAVAILABLE_HINT",
        "Database connection failed. The server may be offline or network connectivity is down.",
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings and log warnings for missing critical configurations."""

        if self.secret_key == DEV_SECRET_KEY:
            logger.warning(
                "SECRET_KEY is using the development default. Set it in production."
            )

        if not self.database_url:
            logger.warning("DATABASE_URL environment variable not set.")

        if self.default_page_size > self.max_page_size:
            logger.warning(
                f"DEFAULT_PAGE_SIZE ({self.default_page_size}) exceeds MAX_PAGE_SIZE "
                f"({self.max_page_size}); listings will be capped."
            )

        logger.debug(f"Using database schema: {self.database_schema}")

        return self

    @property
    def schema_name(self) -> str | None:
        return self.database_schema

    def token_config(self) -> TokenConfig:
        return TokenConfig(
            secret_key=self.secret_key,
            algorithm=self.jwt_algorithm,
            expire_minutes=self.access_token_expire_minutes,
        )

    def task_query_config(self) -> TaskQueryConfig:
        return TaskQueryConfig(
            default_sort_field=self.default_sort_field,
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size,
        )


# Global settings instance
settings = Settings()
