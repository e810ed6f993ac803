"""
Configuration settings for the hybrid record store.

Uses Pydantic Settings to load environment variables for the backing SQLite
file, connection tuning, and logging. Explicit constructor arguments on
`RecordStore` always win over these values; settings only supply defaults.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage
    db_path: str = Field("records.db", alias="RECORDSTORE_DB_PATH")
    table_name: str = Field("records", alias="RECORDSTORE_TABLE")

    # Connection
    timeout_seconds: float = Field(5.0, alias="RECORDSTORE_TIMEOUT")
    busy_timeout_ms: int = Field(5000, alias="RECORDSTORE_BUSY_TIMEOUT_MS")
    journal_mode: Optional[str] = Field(None, alias="RECORDSTORE_JOURNAL_MODE")
    connect_attempts: int = Field(3, alias="RECORDSTORE_CONNECT_ATTEMPTS")
    connect_backoff_max: float = Field(2.0, alias="RECORDSTORE_CONNECT_BACKOFF_MAX")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
