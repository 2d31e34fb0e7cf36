"""Configuration management for Jixify.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once at
application startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production-use-openssl-rand-hex-32"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (prefixed ``JIXIFY_``)
    and .env files. All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JIXIFY_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Jixify"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = ""
    external_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL used to build verification links",
    )

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./jx_data/jixify.db"
    db_echo: bool = False

    # Token Settings
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        description="Secret key for token signing",
    )
    verification_token_ttl_seconds: int = 24 * 60 * 60
    session_token_ttl_seconds: int = 60 * 60

    # Password Hashing Settings (Argon2id)
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 4

    # Email Settings
    email_provider: Literal["smtp", "console"] = "console"
    mail_from_email: str = "no-reply@jixify.local"
    mail_from_name: str = "Jixify"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_timeout: int = 10

    # Completion Settings
    openai_api_key: str | None = None
    completion_model: str = "gpt-4o-mini"
    completion_max_tokens: int = 2000
    completion_system_prompt: str = "You are an assistant."

    # CORS Settings
    cors_origins: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        """Strip the trailing slash so routes and links can be joined safely."""
        return v.rstrip("/")

    @field_validator("verification_token_ttl_seconds", "session_token_ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """Token lifetimes must be positive."""
        if v <= 0:
            raise ValueError("Token TTL must be a positive number of seconds")
        return v

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.is_sqlite:
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @model_validator(mode="after")
    def validate_production_secret_key(self) -> "Settings":
        """Refuse to sign tokens with the published default key in production."""
        if self.is_production and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError(
                "JIXIFY_SECRET_KEY must be set in production. "
                "Generate one with: openssl rand -hex 32"
            )
        return self

    @property
    def is_sqlite(self) -> bool:
        """Check if the database URL points at SQLite."""
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def verification_base_url(self) -> str:
        """Base URL verification links point at, without a trailing slash."""
        return f"{self.external_url.rstrip('/')}{self.api_prefix}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once at startup. Components receive the instance
    explicitly; only composition roots (app factory, CLI) call this.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
