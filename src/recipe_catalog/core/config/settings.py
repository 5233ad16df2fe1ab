"""Application configuration using Pydantic Settings with YAML support.

Configuration is grouped into nested sections that mirror the YAML files
under ``config/base``. Environment-specific overrides live in
``config/environments/{APP_ENV}`` and secrets come from the environment or
a ``.env`` file only.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe Catalog"
    version: str = "1.0.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    prefix: str = "/api"
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []


class StorageSettings(BaseModel):
    """JSON data file settings."""

    data_file: Path = Path("data/recipes.json")
    indent: Literal[0, 2] = 2


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: Path | None = None


class GeminiSettings(BaseModel):
    """Google Gemini generative-language API settings."""

    url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    timeout: float = 60.0
    max_retries: int = 2
    requests_per_minute: float = 10.0


class LLMSettings(BaseModel):
    """LLM configuration settings."""

    enabled: bool = True
    gemini: GeminiSettings = GeminiSettings()


class ImportingSettings(BaseModel):
    """Recipe import gateway settings."""

    fetch_timeout: float = 20.0
    max_html_chars: int = 100_000
    default_timeout: float = 90.0
    max_timeout: float = 300.0
    rate_limit: str = "10/minute"
    backfill_html_chars: int = 50_000
    backfill_delay: float = 1.0


class MetricsSettings(BaseModel):
    """Prometheus metrics settings."""

    enabled: bool = True


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Values passed to ``Settings()``
    2. Environment variables
    3. .env file (secrets only)
    4. Environment-specific YAML files (config/environments/{APP_ENV}/)
    5. Base YAML files (config/base/)
    6. Default values in code

    Any nested setting can be overridden with the '__' delimiter, for example
    ``STORAGE__DATA_FILE=/var/lib/recipes.json``.
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
    storage: StorageSettings = StorageSettings()
    logging: LoggingSettings = LoggingSettings()
    llm: LLMSettings = LLMSettings()
    importing: ImportingSettings = ImportingSettings()
    metrics: MetricsSettings = MetricsSettings()

    # Secrets (from environment / .env only - never in YAML)
    GEMINI_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source between .env and Docker secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def gemini_api_key(self) -> str:
        """API key with stray quotes removed (common in hand-written .env files)."""
        return self.GEMINI_API_KEY.replace('"', "").strip()

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_non_production(self) -> bool:
        """Check if running in local, test or development."""
        return self.APP_ENV in ("local", "test", "development")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
