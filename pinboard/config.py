"""Centralized application configuration using Pydantic settings."""
from datetime import date
from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the core and the bookings service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    database_url: str = Field(
        default="sqlite:///./pinboard.db",
        description="SQLAlchemy database URL. Defaults to local SQLite for development.",
    )
    storage_backend: Literal["sql", "memory"] = Field(
        default="sql",
        description="Shared SQL store, or an in-process store for single-device use.",
    )
    run_db_migrations: bool = Field(
        default=False,
        description="Whether the service should create database tables on startup.",
    )
    seed_demo_data: bool = Field(default=True, description="Seed the in-memory store with a demo booking")

    collision_radius_px: float = Field(default=10.0, gt=0, description="Pin collision radius in on-screen pixels")
    edit_map_width: int = Field(default=2000, gt=0, description="Surface width assumed when an edit omits it")
    edit_map_height: int = Field(default=1000, gt=0, description="Surface height assumed when an edit omits it")

    calendar_anchor: date = Field(default=date(2025, 12, 29), description="Start date of week 1")
    calendar_year: int = Field(default=2026, description="Year the week filter covers")
    max_weeks: int = Field(default=53, gt=0, description="Upper bound on generated weeks")
    week_cache_ttl: int = Field(default=3600, description="TTL (s) for cached week lists")

    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    default_rate_limit: str = Field(default="60/minute", description="Global rate limiting rule")
    write_rate_limit: str = Field(default="20/minute", description="Rate limit for booking writes")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")

    log_dir: str = Field(default="logs", description="Directory for audit log files")
    bookings_service_port: int = 8003


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
