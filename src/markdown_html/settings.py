from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .config import CONFIG_FILE, AppConfig, load_config

ENV_PREFIX = "MDH_"


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime overrides sourced from environment variables."""

    config_path: Path = CONFIG_FILE
    base_path: str | None = None


def _read_settings() -> Settings:
    config_env = os.getenv(f"{ENV_PREFIX}CONFIG_PATH")
    base_path_env = os.getenv(f"{ENV_PREFIX}BASE_PATH")
    config_path = Path(config_env) if config_env else CONFIG_FILE
    base_path = base_path_env.strip() if base_path_env and base_path_env.strip() else None
    return Settings(config_path=config_path, base_path=base_path)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return _read_settings()


def resolve_config(path: Path | None = None, settings: Settings | None = None) -> AppConfig:
    """Load ``config.toml`` and apply environment overrides on top."""

    settings = settings or get_settings()
    config = load_config(path or settings.config_path)
    if settings.base_path is not None:
        config.images.base_path = settings.base_path
    return config


__all__ = ["ENV_PREFIX", "Settings", "get_settings", "resolve_config"]
