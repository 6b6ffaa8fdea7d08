"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    APP_CONFIG_PATH: str = Field(default="app_config.json")
    QUESTIONS_PATH: str = Field(default="")

    SESSION_STORE: str = "memory"
    DB_PATH: str = Field(default="data/sessions.db")

    DEFAULT_LEVEL: str = ""

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
