"""Application settings loaded from environment variables and ``.env`` files."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def env_files(environment: str | None = None) -> tuple[str, ...]:
    """Return the ``.env`` files to read; ``.env.<ENVIRONMENT>`` wins over ``.env``."""
    environment = environment or os.environ.get("ENVIRONMENT")
    if environment:
        return (".env", f".env.{environment}")
    return (".env",)


class Settings(BaseSettings):
    APP_NAME: str = Field(default="Calendar Events API")

    APP_HOST: str = Field(default="0.0.0.0")

    APP_PORT: int = Field(default=3000, ge=1, le=65535)

    ENVIRONMENT: Literal["development", "test", "production"] = Field(
        default="development"
    )

    LOG_LEVEL: str = Field(default="INFO")

    # Comma-separated; "*" allows every origin.
    CORS_ORIGINS: str = Field(default="*")

    DATABASE_NAME: str = Field(default="events")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    # Env files are chosen here, not at import, so a later ENVIRONMENT counts.
    return Settings(_env_file=env_files())
