"""Application Settings - Pydantic Settings for environment configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file or environment variables.
    Validation is automatic via Pydantic.
    """

    # Database (Supabase)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    appointments_table: str = "appointments"

    # Legacy money columns, first non-null wins when mapping rows
    amount_fields: list[str] = ["amount", "price", "total"]

    # Agenda / reports
    default_service_label: str = "unspecified"
    report_statuses: list[str] = ["done", "confirmed"]
    # Pending product decision: cancelled appointments are not flagged as archived
    archive_on_cancel: bool = False

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    api_port: int = 8000
    api_host: str = "0.0.0.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for performance - settings are loaded once.
    """
    return Settings()
