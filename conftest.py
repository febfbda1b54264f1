from datetime import datetime, timezone

import pytest

from manga_script import FixedClock, SequentialIds

FIXED_INSTANT = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

_SETTINGS_ENV = (
    "MANGA_CANVAS_WIDTH",
    "MANGA_CANVAS_HEIGHT",
    "MANGA_DEFAULT_X",
    "MANGA_DEFAULT_Y",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep a developer's .env / shell overrides out of every test."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(FIXED_INSTANT)
