"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Employee Management API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database (required - no default for security)
    database_url: str = Field(
        description="Database connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10
    # Create missing tables on startup; production deployments run alembic instead
    database_auto_create: bool = True

    # Security - JWT
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60
    jwt_issuer: str = "employee-api"
    jwt_audience: str = "employee-app"

    # Security - Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    # Rate limiting (requests per minute)
    rate_limit_default: int = 100
    rate_limit_auth_login: int = 5
    rate_limit_storage_uri: str = "memory://"

    # Reverse proxies allowed to set X-Forwarded-For (comma-separated IPs or CIDRs)
    trusted_proxies: str = ""

    # Default director created on first start when the table is empty
    seed_admin_enabled: bool = True
    seed_admin_email: str = "admin@empresa.com"
    seed_admin_password: str = "Admin@123"
    seed_admin_document: str = "00000000000"

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security requirements."""
        # Security: Prevent debug mode in production
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = self.database_url
        if not url.startswith(("postgresql://", "postgres://", "postgresql+asyncpg://", "sqlite")):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (postgresql://) or a SQLite URL"
            )

        if self.environment == "production":
            if url.startswith("sqlite"):
                raise ValueError("SQLite cannot be used in production environment")

            if len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
                raise ValueError(
                    f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} unique characters "
                    "for sufficient entropy. Use a cryptographically random value."
                )

            if self.seed_admin_enabled and self.seed_admin_password == "Admin@123":
                raise ValueError("SEED_ADMIN_PASSWORD must be changed in production")

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy.

        PostgreSQL URLs are rewritten to the asyncpg driver and the
        sslmode parameter is renamed to ssl for asyncpg compatibility.
        SQLite URLs are passed through and must name the aiosqlite driver.
        """
        url = self.database_url
        if url.startswith("sqlite"):
            return url
        url = url.replace("postgres://", "postgresql://", 1)
        if not url.startswith("postgresql+asyncpg://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url.replace("sslmode=", "ssl=")

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @property
    def trusted_proxies_list(self) -> list[str]:
        """Get trusted proxy addresses as a list."""
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
