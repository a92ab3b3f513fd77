from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///ranchcycle.db"
    log_level: str = "INFO"
    environment: str = "dev"
    # Ranch calendar used for day counts ("UTC" or an IANA name)
    timezone: str = "America/Mexico_City"
    # Applied to load/save when the caller passes no timeout
    persistence_timeout_seconds: float = 5.0
    cycle_code_prefix: str = "REP"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("database_url")
    @classmethod
    def ensure_async_driver(cls, value: str) -> str:
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql+asyncpg://", 1)
        if value.startswith("postgresql://") and "+" not in value.split("://", 1)[0]:
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        if value.startswith("sqlite://"):
            return value.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return value

    @field_validator("persistence_timeout_seconds")
    @classmethod
    def ensure_positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("persistence_timeout_seconds must be positive")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
