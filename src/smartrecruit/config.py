from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Backend
    api_url: str = "http://localhost:5000/api/v1"
    request_timeout: float = 15.0
    session_path: str = "~/.smartrecruit/session.json"

    # List views
    candidates_page_size: int = 15
    recent_page_size: int = 5

    # Dialogs close themselves this long after a successful send/delete
    auto_close_seconds: float = 3.0

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/smartrecruit.log"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
