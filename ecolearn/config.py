"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./ecolearn.db"
    db_pool_size: int = 5  # ignored for SQLite
    db_max_overflow: int = 10

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "EcoLearn Progression Service"
    version: str = "1.0.0"
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",  # Vite default
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Progression
    developer_mode_enabled: bool = False  # allows ?bypass=true on progression routes
    catalog_path: Optional[str] = None  # JSON catalog replacing the bundled content


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
