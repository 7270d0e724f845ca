"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseModel):
    base_url: AnyHttpUrl = Field(
        default="https://hn.algolia.com/api/v1",
        description="Root of the item-search API; endpoints are appended to it.",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    fetch_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=300,
        description="Upper bound on a single fetch before it is reported as failed.",
    )
    hits_per_page: int = Field(default=20, ge=1, le=1000)


class StorageSettings(BaseModel):
    dsn: str = Field(
        default="sqlite:///hnsearch.sqlite3",
        description="SQLAlchemy DSN for the key/value store.",
    )
    echo: bool = False


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HNSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    api: ApiSettings = Field(default_factory=ApiSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache
def get_settings() -> AppSettings:
    """Return cached settings instance."""

    return AppSettings()


__all__ = [
    "ApiSettings",
    "AppSettings",
    "StorageSettings",
    "get_settings",
]
