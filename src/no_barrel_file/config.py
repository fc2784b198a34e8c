"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (``NO_BARREL_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="NO_BARREL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False

    # Discovery
    extensions: Annotated[tuple[str, ...], NoDecode] = (".ts", ".js", ".tsx", ".jsx")
    gitignore_path: str = ".gitignore"
    max_file_size_bytes: int = 1_000_000  # 1MB

    # Replace
    worker_count: int = 1

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return upper

    @field_validator("extensions", mode="before")
    @classmethod
    def split_extensions(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_extensions(v)
        return v

    @field_validator("worker_count")
    @classmethod
    def validate_worker_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError("worker_count must be >= 1")
        return v


def parse_extensions(value: str) -> tuple[str, ...]:
    """Split a comma-separated extension list, adding missing leading dots."""
    extensions = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        extensions.append(part if part.startswith(".") else f".{part}")
    return tuple(extensions)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
