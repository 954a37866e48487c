"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from drive.config import get_settings
    >>> settings = get_settings()
    >>> settings.CONTENT_TOKEN_EXPIRE_MINUTES
    60

Tests:
    - tests/unit/test_config.py::TestSettings
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


_INSECURE_DEFAULT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        DATABASE_URL: Database connection string (SQLite or PostgreSQL)
        JWT_SECRET_KEY: HMAC secret for session and content tokens
        JWT_ACCESS_EXPIRE_MINUTES: Session token lifetime
        CONTENT_TOKEN_EXPIRE_MINUTES: Download/preview link lifetime
        BLOB_ROOT: Root directory of the local blob store
        PUBLIC_PREVIEW_ENABLED: Serve file content by bare id without a token
        MAX_FOLDER_DEPTH: Upper bound for ancestor walks
        MAX_UPLOAD_BYTES: Largest accepted upload
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./drive.db",
        description="Database connection string",
    )

    # Tokens
    JWT_SECRET_KEY: str = Field(
        default=_INSECURE_DEFAULT_SECRET,
        description="Secret used to sign session and content tokens",
    )
    JWT_ACCESS_EXPIRE_MINUTES: int = Field(
        default=60 * 24,
        description="Session token lifetime in minutes",
        ge=1,
    )
    CONTENT_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60,
        description="Download/preview token lifetime in minutes",
        ge=1,
    )

    # Blob storage
    BLOB_ROOT: str = Field(
        default="./uploads",
        description="Root directory for stored file content",
    )
    PUBLIC_PREVIEW_ENABLED: bool = Field(
        default=False,
        description="Allow reading file content by id alone (no token, no session)",
    )
    MAX_UPLOAD_BYTES: int = Field(
        default=100 * 1024 * 1024,
        description="Maximum upload size in bytes",
        ge=1,
    )

    # Namespace
    MAX_FOLDER_DEPTH: int = Field(
        default=256,
        description="Maximum folder nesting depth followed by ancestor walks",
        ge=1,
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode",
    )
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        valid_prefixes = ("sqlite", "postgresql", "postgres")
        if not any(v.startswith(prefix) for prefix in valid_prefixes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {valid_prefixes}"
            )
        return v

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        """Reject empty signing secrets."""
        if not v.strip():
            raise ValueError("JWT_SECRET_KEY must not be empty")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def uses_default_secret(self) -> bool:
        """True while JWT_SECRET_KEY is still the shipped placeholder."""
        return self.JWT_SECRET_KEY == _INSECURE_DEFAULT_SECRET


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.
    """
    return Settings()
