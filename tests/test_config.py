"""Tests for settings and logging setup."""
import io
import json
import logging
import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError as SettingsValidationError

from shapeguard.config import Settings, get_settings
from shapeguard.logging import configure_logging, get_logger


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, settings_env):
        settings = settings_env()
        assert settings.DEFAULT_ROOT_NAME == "input"
        assert settings.MAX_DEPTH == 256
        assert settings.MAX_ERRORS == 50
        assert settings.LOG_JSON is False

    def test_environment_override(self, settings_env):
        settings = settings_env(MAX_DEPTH=10, LOG_JSON="true", DEFAULT_ROOT_NAME="body")
        assert settings.MAX_DEPTH == 10
        assert settings.LOG_JSON is True
        assert settings.DEFAULT_ROOT_NAME == "body"
        assert get_settings() is settings

    def test_rejects_non_positive_limits(self, monkeypatch):
        monkeypatch.setenv("SHAPEGUARD_MAX_DEPTH", "0")
        with pytest.raises(SettingsValidationError):
            Settings()


def _console_handler() -> logging.StreamHandler:
    return next(h for h in logging.getLogger("shapeguard").handlers if type(h) is logging.StreamHandler)


class TestLogging:
    """Test structlog configuration."""

    @pytest.fixture
    def json_debug_logging(self):
        configure_logging(level="DEBUG", json_logs=True)
        yield
        configure_logging(level="WARNING")

    def test_library_logger_is_isolated(self, json_debug_logging):
        library_logger = logging.getLogger("shapeguard")
        assert library_logger.level == logging.DEBUG
        assert library_logger.propagate is False
        assert [type(h) for h in library_logger.handlers].count(logging.StreamHandler) == 1

    def test_json_output(self, json_debug_logging):
        stream = io.StringIO()
        _console_handler().setStream(stream)
        get_logger("tests").info("hello", answer=42)
        event = json.loads(stream.getvalue().splitlines()[-1])
        assert event["event"] == "hello"
        assert event["answer"] == 42
        assert event["logger"] == "shapeguard.tests"
        assert event["library"] == "shapeguard"
        assert event["level"] == "info"

    @pytest.mark.parametrize("statement", [
        "number().convert_string().parse('1')",
        "string().safe_parse(1)",
    ])
    def test_unconfigured_library_is_silent(self, statement):
        script = f"from shapeguard import number, string\n{statement}\n"
        completed = subprocess.run(
            [sys.executable, "-c", script],
            capture_output=True, text=True, cwd=Path(__file__).resolve().parents[1], check=True,
        )
        assert completed.stdout == ""
        assert completed.stderr == ""
