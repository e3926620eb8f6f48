"""Application settings and shared constants."""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONSUMPTION_KEY_SEPARATOR = "_"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Production Planning Store"
    database_url: str = "sqlite:///./lab2.db"
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be a standard logging level name")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
