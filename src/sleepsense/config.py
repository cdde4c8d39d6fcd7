"""
Service configuration using Pydantic Settings.

Loads from ``IOT_``-prefixed environment variables with .env file support.
Settings are built once at process start and passed to the components that
need them; there is no module-level instance.
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ingress, storage and pusher settings."""

    model_config = SettingsConfigDict(
        env_prefix="IOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Shared secret expected in the x-api-key header (IOT_API_KEY)
    api_key: str = ""

    # Record store
    store_path: str = "data/iot_data.jsonl"

    # Ingress server
    host: str = "127.0.0.1"
    port: int = 8000

    # Pusher target
    endpoint_url: str = "http://127.0.0.1:8000/storeIoTData"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
