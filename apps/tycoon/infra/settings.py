from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


logger = logging.getLogger(__name__)

StorageBackend = Literal["postgres", "sqlite", "memory"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="tap_tycoon", alias="APP_NAME")
    bot_token: str = Field(..., min_length=1, alias="BOT_TOKEN")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    storage_backend: StorageBackend | None = Field(default=None, alias="STORAGE_BACKEND")
    database_ssl: bool = Field(default=False, alias="DATABASE_SSL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    postgres_pool_size: int = Field(default=10, alias="POSTGRES_POOL_SIZE")
    postgres_max_overflow: int = Field(default=5, alias="POSTGRES_MAX_OVERFLOW")
    postgres_pool_timeout: int = Field(default=30, alias="POSTGRES_POOL_TIMEOUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    save_max_bytes: int = Field(default=1_048_576, gt=0, alias="SAVE_MAX_BYTES")
    cors_origins: Annotated[list[str], NoDecode] = Field(default=["*"], alias="CORS_ORIGINS")
    game_url: str | None = Field(default=None, alias="GAME_URL")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        # CORS_ORIGINS=https://a.example,https://b.example
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @model_validator(mode="after")
    def _resolve_backend(self) -> "Settings":
        if self.storage_backend == "memory":
            if self.database_url:
                logger.warning("STORAGE_BACKEND=memory ignores DATABASE_URL; data will not survive a restart.")
            return self
        if not self.database_url:
            raise ValueError("DATABASE_URL is required unless STORAGE_BACKEND=memory")
        backend = backend_from_url(self.database_url)
        if self.storage_backend is not None and self.storage_backend != backend:
            raise ValueError(f"STORAGE_BACKEND={self.storage_backend} does not match DATABASE_URL ({backend})")
        object.__setattr__(self, "storage_backend", backend)
        return self

    @property
    def async_database_url(self) -> str | None:
        return to_async_url(self.database_url) if self.database_url else None


def backend_from_url(url: str) -> StorageBackend:
    scheme = url.split(":", 1)[0].split("+", 1)[0].lower()
    if scheme == "sqlite":
        return "sqlite"
    if scheme in ("postgres", "postgresql"):
        return "postgres"
    raise ValueError(f"Unsupported DATABASE_URL scheme: {scheme}")


def to_async_url(url: str) -> str:
    """Point a plain database URL at the async driver SQLAlchemy needs.

    Hosting providers hand out ``postgres://`` or ``postgresql://`` URLs;
    explicit driver suffixes are left untouched.
    """
    scheme, sep, rest = url.partition("://")
    if not sep or "+" in scheme:
        return url
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg://{rest}"
    if scheme == "sqlite":
        return f"sqlite+aiosqlite://{rest}"
    return url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
