"""Configuration management using pydantic-settings."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Constant list settings loaded from environment variables."""

    # Debug mode bypasses the cache and rescans on every call
    debug: bool = False

    # Cache settings
    cache_ttl_seconds: int = 3600

    class Config:
        env_prefix = "CONSTANT_LIST_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
