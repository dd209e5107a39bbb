"""Configuration and environment settings for m-manager."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for m-manager."""

    database_url: str = "sqlite:///./mmanager.db"
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    log_file: str = "logs/mmanager.log"
    log_level: str = "INFO"
    owner_header: str = "X-Owner-Id"
    recent_transactions_limit: int = 5
    view_cache_enabled: bool = True
    view_cache_max_entries: int = 128

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
