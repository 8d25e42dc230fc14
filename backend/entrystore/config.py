"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables (prefix ENTRYSTORE_)."""

    model_config = SettingsConfigDict(
        env_prefix="ENTRYSTORE_",
        env_file=".env",
        extra="ignore",
    )

    # Storage
    database_path: str = "~/.entrystore/entrystore.db"
    database_timeout_seconds: float = 5.0

    # Registration policy
    min_username_length: int = 3
    min_password_length: int = 4

    # Password hashing (first scheme hashes new passwords, the rest only verify)
    password_schemes: list[str] = ["pbkdf2_sha256", "hex_sha256"]

    # Session tokens
    session_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    session_algorithm: str = "HS256"
    session_expire_minutes: int = 720

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
