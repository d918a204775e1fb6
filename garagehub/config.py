"""
Configuration settings for Garage Hub.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Garage Hub"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://garage_user:garage_pass@db:5432/garage_db"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # API
    api_v1_prefix: str = "/api/v1"

    # Garage defaults
    default_garage_name: str = "My Garage"
    default_tax_rate: float = 18.0  # Indian GST
    loyalty_points_per_job: int = 10
    reminder_lookahead_days: int = 30

    # Query cache staleness (seconds)
    cache_ttl_default: int = 60
    cache_ttl_invoices: int = 180
    cache_ttl_staff: int = 600
    cache_ttl_revenue_sync: int = 300

    # Realtime: changes buffered per websocket client before it is dropped
    realtime_queue_size: int = 1000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
