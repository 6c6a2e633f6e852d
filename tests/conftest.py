import pytest

from droll import dice
from droll.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings and the process generator around each test."""
    monkeypatch.delenv("DROLL_SEED", raising=False)
    monkeypatch.delenv("DROLL_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(dice, "_rng", None)
    yield
    get_settings.cache_clear()


@pytest.fixture
def max_rolls(monkeypatch):
    """Make the default random source always roll the highest face."""
    monkeypatch.setattr(dice, "default_random_source", lambda: 1.0)
