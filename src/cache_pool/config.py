"""Cache configuration."""

import os
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class CacheSettings(BaseSettings):
    """Cache settings loaded from ``CACHE_``-prefixed environment variables."""

    backend: Literal["memory", "file", "supabase"] = "memory"
    default_ttl: int | None = 3600
    file_directory: str | None = None
    file_extension: str = "cache"
    session_key: str = "cache_pool.pool"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "cache_items"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("default_ttl", mode="before")
    @classmethod
    def _parse_default_ttl(cls, value: object) -> object:
        return parse_default_ttl(value)


def parse_default_ttl(raw: object) -> object:
    """Map empty or "none" TTL input to None; leave other values to pydantic."""
    if isinstance(raw, str):
        cleaned = raw.strip().lower()
        if cleaned in {"", "none", "null"}:
            return None
        return cleaned
    return raw
