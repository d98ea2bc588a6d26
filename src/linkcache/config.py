"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (LINKCACHE__CACHE__TIMEFRAME=2w)
  3. linkcache.yaml         (searched in cwd, then platform config dir)

Caching is off unless a ``cache`` section is present in one of the sources.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from linkcache.timeframe import parse_timeframe

DEFAULT_STORAGE_DIR = str(Path("tmp") / ".linkcache")
DEFAULT_CACHE_FILE_NAME = "cache.json"
DEFAULT_TIMEFRAME = "30d"


def _find_config_file() -> str | None:
    """Return the path of the first linkcache.yaml found, or None."""
    candidates = [
        Path("linkcache.yaml"),
        Path(platformdirs.user_config_dir("linkcache")) / "linkcache.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    storage_dir: str = DEFAULT_STORAGE_DIR
    cache_file: str = DEFAULT_CACHE_FILE_NAME
    timeframe: str = DEFAULT_TIMEFRAME

    @field_validator("timeframe")
    @classmethod
    def validate_timeframe(cls, v: str) -> str:
        # Raises InvalidTimeframeError, a ValueError, on malformed input
        parse_timeframe(v, datetime.now(UTC))
        return v.strip()


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: LINKCACHE__CACHE__STORAGE_DIR=.cache
        env_prefix="LINKCACHE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings | None = None
    logging: LoggingSettings = LoggingSettings()

    @field_validator("cache", mode="before")
    @classmethod
    def blank_cache_disables(cls, v: Any) -> Any:
        # An empty `cache:` section means caching is off, not "use defaults"
        if isinstance(v, str):
            v = v.strip()
        if not v:
            return None
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
