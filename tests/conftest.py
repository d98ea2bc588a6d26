"""Shared test fixtures for the linkcache test suite."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from linkcache.cache import LinkCache, open_cache
from linkcache.config import CacheSettings
from linkcache.state import RunContext

if TYPE_CHECKING:
    from pathlib import Path

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clear_linkcache_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's LINKCACHE__* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("LINKCACHE__"):
            monkeypatch.delenv(name)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def context(now: datetime) -> RunContext:
    """Run context with a one-week timeframe."""
    return RunContext.start("7d", now)


@pytest.fixture()
def cache_settings(tmp_path: Path) -> CacheSettings:
    return CacheSettings(storage_dir=str(tmp_path / "cache"), timeframe="7d")


@pytest.fixture()
def cache(cache_settings: CacheSettings, now: datetime) -> LinkCache:
    opened = open_cache(cache_settings, now=now)
    assert isinstance(opened, LinkCache)
    return opened
