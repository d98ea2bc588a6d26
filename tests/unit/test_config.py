"""Unit tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import platformdirs
import pytest
from pydantic import ValidationError

import linkcache.config as config_module
from linkcache.config import (
    DEFAULT_CACHE_FILE_NAME,
    DEFAULT_STORAGE_DIR,
    DEFAULT_TIMEFRAME,
    CacheSettings,
    Settings,
    _find_config_file,
)


class TestCacheSettings:
    def test_defaults(self) -> None:
        settings = CacheSettings()
        assert settings.storage_dir == DEFAULT_STORAGE_DIR
        assert settings.cache_file == DEFAULT_CACHE_FILE_NAME
        assert settings.timeframe == DEFAULT_TIMEFRAME

    def test_default_storage_dir_is_relative(self) -> None:
        assert not Path(DEFAULT_STORAGE_DIR).is_absolute()

    def test_timeframe_validated(self) -> None:
        with pytest.raises(ValidationError, match="not a valid timeframe"):
            CacheSettings(timeframe="6months")

    def test_timeframe_stripped(self) -> None:
        assert CacheSettings(timeframe=" 6M ").timeframe == "6M"


class TestSettings:
    def test_cache_disabled_by_default(self) -> None:
        assert Settings().cache is None

    @pytest.mark.parametrize("section", [{}, "", "  ", None])
    def test_blank_cache_section_disables(self, section: object) -> None:
        assert Settings(cache=section).cache is None

    def test_blank_cache_section_from_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "linkcache.yaml"
        config_file.write_text("cache: {}\n", encoding="utf-8")
        monkeypatch.setitem(Settings.model_config, "yaml_file", str(config_file))

        assert Settings().cache is None

    def test_cache_section_from_constructor(self) -> None:
        settings = Settings(cache={"timeframe": "2w"})
        assert settings.cache is not None
        assert settings.cache.timeframe == "2w"
        assert settings.cache.cache_file == DEFAULT_CACHE_FILE_NAME

    def test_cache_section_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINKCACHE__CACHE__TIMEFRAME", "12h")
        monkeypatch.setenv("LINKCACHE__CACHE__STORAGE_DIR", "build/.links")

        settings = Settings()

        assert settings.cache is not None
        assert settings.cache.timeframe == "12h"
        assert settings.cache.storage_dir == "build/.links"

    def test_invalid_timeframe_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINKCACHE__CACHE__TIMEFRAME", "forever")
        with pytest.raises(ValidationError):
            Settings()

    def test_logging_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINKCACHE__LOGGING__LEVEL", "DEBUG")
        assert Settings().logging.level == "DEBUG"


class TestFindConfigFile:
    def test_prefers_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "linkcache.yaml").write_text("cache:\n  timeframe: 1d\n", encoding="utf-8")
        assert _find_config_file() == "linkcache.yaml"

    def test_falls_back_to_platform_config_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "linkcache.yaml").write_text("{}\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(config_module.platformdirs, "user_config_dir", lambda _: str(config_dir))

        assert _find_config_file() == str(config_dir / "linkcache.yaml")

    def test_none_when_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(platformdirs, "user_config_dir", lambda _: str(tmp_path / "nope"))
        assert _find_config_file() is None
