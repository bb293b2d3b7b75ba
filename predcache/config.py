"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "predcache"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./data/predcache.db"
    store_timeout: float = 5.0  # seconds per store operation

    # Queries
    default_page_size: int = 20
    max_page_size: int = 50
    stale_after_minutes: int = 360  # ingestion runs every 6 hours
    past_window_hours: int = 24

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "PREDCACHE_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
