"""
RecipeBox Backend: Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and produces a Settings object.
Who:   Built once by the entry point and handed to create_app(); every
       component that needs a value receives it from there (app.state.settings).
When:  Constructed at process start; validated before the app serves traffic.

Design Decision:
    There is no module-level settings instance. The signing secret, database
    URL and upload location travel inside the Settings object passed to the
    application factory, so two apps with different configuration can live in
    the same process (tests rely on this).
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "recipebox-dev-secret-change-me"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for local development against a
    SQLite file. Production deployments MUST override JWT_SECRET and
    usually DATABASE_URL and PUBLIC_BASE_URL.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///path.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./recipes.db",
        description="Async SQLAlchemy connection URL",
    )

    # Pool sizing applies to server databases only; SQLite ignores it
    db_pool_size: int = Field(default=20, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Create missing tables on startup (CREATE TABLE IF NOT EXISTS semantics)
    auto_create_schema: bool = Field(default=True)

    # ── Authentication ────────────────────────────────────────────────────
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET, min_length=1)
    jwt_algorithm: str = Field(default="HS256")

    # Tokens are valid for one hour from issuance
    token_ttl_seconds: int = Field(default=3600, ge=1)

    # bcrypt cost factor; 4 is the library minimum
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ── File Uploads ──────────────────────────────────────────────────────
    upload_dir: str = Field(default="./uploads")

    # Prefix used to build the imageUrl returned by POST /upload
    public_base_url: str = Field(default="http://localhost:5000")

    # Default: 10MB
    max_upload_size: int = Field(default=10_485_760, ge=1)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins, "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that security-sensitive settings were overridden.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append(
                "JWT_SECRET is using the development default. "
                "Set a long random value before exposing the service."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )
