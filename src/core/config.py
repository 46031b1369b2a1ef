"""
CrowdRisk - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./crowdrisk.db"
    db_echo: bool = False

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Point risk
    risk_radius_km: float = 5.0

    # Route safety (sampled corridor)
    route_sample_steps: int = 25
    route_radius_km: float = 5.0

    # Route safety (corridor distance)
    corridor_threshold_km: float = 2.0
    corridor_penalty_per_incident: int = 15


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
