"""Test configuration for shapeguard."""
import pytest

from shapeguard.config import get_settings
from shapeguard.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep engine debug events out of test output."""
    configure_logging(level="WARNING")


@pytest.fixture
def settings_env(monkeypatch):
    """Set SHAPEGUARD_* environment variables and reload settings."""
    def apply(**values):
        for key, value in values.items():
            monkeypatch.setenv(f"SHAPEGUARD_{key}", str(value))
        get_settings.cache_clear()
        return get_settings()

    yield apply
    get_settings.cache_clear()
