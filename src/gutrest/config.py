"""Application configuration."""

import os
from datetime import tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["sqlite", "supabase"] = "sqlite"
    database_path: str = "gutrest.db"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    timezone: str | None = None
    fasting_lookback_hours: int = Field(default=48, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="GUTREST_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_key
        ):
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase storage backend"
            )
        return self

    def resolve_timezone(self) -> tzinfo | None:
        """Return the configured timezone, or None for the device's local zone."""
        if self.timezone is None or not self.timezone.strip():
            return None
        return ZoneInfo(self.timezone.strip())
