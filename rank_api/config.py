"""
Configuration and settings for the rank API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Firestore
    project_id: Optional[str] = Field(default=None)
    firestore_emulator_host: Optional[str] = Field(default=None)
    firestore_collection: str = Field(default="ranks")

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Prometheus exporter
    metrics_enabled: bool = Field(default=True)
    metrics_host: str = Field(default="0.0.0.0")
    metrics_port: int = Field(default=9000)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="detailed")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "RANK_API_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
