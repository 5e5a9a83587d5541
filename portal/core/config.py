"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Session store (single persisted identity slot)
    session_db_url: str = "sqlite:///./portal_session.db"
    session_storage_key: str = "placement_portal_auth"

    # Simulated backend latency (seconds)
    login_delay_seconds: float = 1.0
    signup_delay_seconds: float = 1.5

    # Credential rules
    min_password_length: int = 6

    # Navigation
    default_view: str = "dashboard"
    back_shortcut: str = "alt+ArrowLeft"

    # App
    debug: bool = False
    log_level: str = "INFO"

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
