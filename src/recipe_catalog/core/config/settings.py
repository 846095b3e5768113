"""Application configuration using Pydantic Settings with YAML support.

Configuration is organised in nested sections that mirror the YAML files in
``config/base``. Secrets (JWT signing key, database password, Edamam app key)
are only ever read from the environment or ``.env``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe Catalog Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1"
    cors_origins: list[str] = []


class JwtSettings(BaseModel):
    """JWT token settings."""

    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24


class AuthSettings(BaseModel):
    """Authentication configuration settings."""

    jwt: JwtSettings = JwtSettings()
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    min_password_length: int = Field(default=6, ge=1)


class DatabaseSettings(BaseModel):
    """PostgreSQL database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    name: str = "recipe_catalog"
    user: str | None = None
    min_pool_size: int = Field(default=1, ge=0)
    max_pool_size: int = Field(default=10, ge=1)
    command_timeout: float = Field(default=60.0, gt=0)
    ssl: bool = False


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: str | None = None


class ContentSettings(BaseModel):
    """Local image store and the URL it is published under."""

    image_dir: str = "images"
    public_base_url: str = "/images/"
    serve_images: bool = True


class IngestionSettings(BaseModel):
    """Edamam ingestion job configuration."""

    api_base_url: str = "https://api.edamam.com/api/recipes/v2"
    app_id: str = "81c3484e"
    query: str = "smoothie"
    # 10 requests/minute quota plus margin
    page_delay_seconds: float = Field(default=6.1, gt=0)
    # Stop paginating once this few results remain in the upstream total.
    budget_threshold: int = Field(default=9000, ge=0)
    image_concurrency: int = Field(default=8, ge=1)
    request_timeout: float = Field(default=30.0, gt=0)
    image_timeout: float = Field(default=30.0, gt=0)


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Priority (highest to lowest): init arguments, environment variables,
    ``.env``, environment-specific YAML, base YAML, defaults in code.
    Nested values are overridden with ``__``, e.g. ``DATABASE__HOST=db``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    auth: AuthSettings = AuthSettings()
    database: DatabaseSettings = DatabaseSettings()
    logging: LoggingSettings = LoggingSettings()
    content: ContentSettings = ContentSettings()
    ingestion: IngestionSettings = IngestionSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    JWT_SECRET_KEY: str = ""
    DATABASE_PASSWORD: str = ""
    EDAMAM_APP_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def database_dsn(self) -> str:
        """PostgreSQL DSN without the password (safe to log)."""
        user_part = f"{self.database.user}@" if self.database.user else ""
        return (
            f"postgresql://{user_part}{self.database.host}:"
            f"{self.database.port}/{self.database.name}"
        )

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_non_production(self) -> bool:
        """API docs and verbose errors are enabled outside production."""
        return self.APP_ENV in ("local", "test", "development")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
