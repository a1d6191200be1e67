"""Typed configuration backed by environment variables and an optional `.env` file."""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_ENV_FILES = (Path(".env"),)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(default=Path("data"), description="Directory holding the JSON collections.")
    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to.")
    port: int = Field(default=3000, description="HTTP port.")
    log_level: str = Field(default="INFO", description="Root logging level.")
    cors_origins: List[str] = Field(default=["*"], description="Origins allowed by CORS.")
    fsync: bool = Field(default=True, description="fsync each document before renaming it into place.")


def _existing_env_files() -> List[str]:
    return [str(path) for path in _DEFAULT_ENV_FILES if path.exists()]


@lru_cache
def _load_settings(env_files: Tuple[str, ...]) -> Settings:
    if env_files:
        return Settings(_env_file=list(env_files))
    return Settings()


def get_settings(_env_files: Optional[Sequence[str]] = None) -> Settings:
    """Load settings once per process, respecting `.env` fallbacks."""
    env_files = _env_files if _env_files is not None else _existing_env_files()
    return _load_settings(tuple(env_files))
