import pytest
from pydantic import ValidationError

from droll.config import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.log_level == "WARNING"
    assert settings.seed is None


def test_reads_prefixed_env(monkeypatch):
    monkeypatch.setenv("DROLL_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DROLL_SEED", "7")

    settings = Settings(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.seed == 7


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_rejects_unknown_log_level(monkeypatch):
    monkeypatch.setenv("DROLL_LOG_LEVEL", "bogus")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
