"""
Global test configuration fixtures for TT Bot tests.

Provides validated configuration objects, a fixed "now" for time dependent
tests and isolation of the process-wide error tracker and environment.
"""

from __future__ import annotations

from collections.abc import Generator
from datetime import datetime

import pytest

from src.tt_bot.config.schema import TTBotConfig
from src.tt_bot.utils.core.error_handler import ErrorTracker
from tests.utils.test_helpers import create_test_config


@pytest.fixture
def base_config() -> TTBotConfig:
    """Minimal valid configuration with the default offset of UTC+1."""
    return create_test_config()


@pytest.fixture
def utc_config() -> TTBotConfig:
    """Configuration whose default timezone is UTC."""
    return create_test_config(default_utc_offset_minutes=0)


@pytest.fixture
def guild_config() -> TTBotConfig:
    """Configuration that registers commands in a single guild."""
    return create_test_config(guild_id=123456789012345678)


@pytest.fixture
def fixed_now() -> datetime:
    """A naive local time that is unambiguous in every supported timezone."""
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def tracker() -> ErrorTracker:
    """A fresh error tracker, independent of the global instance."""
    return ErrorTracker()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove environment variables that change configuration loading."""
    for name in ("DISCORD_TOKEN", "GUILD_ID", "TT_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    yield
