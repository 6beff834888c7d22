"""
Application settings.

Loaded once from environment variables (prefix ``HOMECARE_``) and an
optional ``.env`` file in the working directory.

    from app.config import settings
    settings.timezone  # "America/Sao_Paulo"
"""
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HOMECARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Home Care Visit Tracker"
    app_version: str = "1.0.0"
    environment: str = "development"

    host: str = "0.0.0.0"
    port: int = 8000

    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Calendar days, "today" and week bounds are evaluated in this zone
    timezone: str = "America/Sao_Paulo"

    cors_origins: List[str] = ["*"]

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


settings = Settings()
