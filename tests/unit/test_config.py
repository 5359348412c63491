"""Unit tests for checkmate.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from checkmate.config import Settings, load_settings


class TestSettingsDefaults:
    def test_default_concurrent(self):
        assert Settings().concurrent is False

    def test_default_max_workers(self):
        assert Settings().max_workers is None

    def test_default_failure_preview(self):
        assert Settings().failure_preview == 5

    def test_default_logging(self):
        settings = Settings()
        assert settings.structured_logging is False
        assert settings.log_level == "WARNING"


class TestSettingsFromEnv:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CHECKMATE_CONCURRENT", "true")
        monkeypatch.setenv("CHECKMATE_MAX_WORKERS", "3")
        settings = Settings()
        assert settings.concurrent is True
        assert settings.max_workers == 3

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("checkmate_failure_preview", "2")
        assert Settings().failure_preview == 2

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("CHECKMATE_LOG_LEVEL", " debug ")
        assert Settings().log_level == "DEBUG"


class TestSettingsValidation:
    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            Settings(log_level="chatty")

    def test_max_workers_positive(self):
        with pytest.raises(ValidationError):
            Settings(max_workers=0)

    def test_failure_preview_positive(self):
        with pytest.raises(ValidationError):
            Settings(failure_preview=0)


class TestLoadSettings:
    def test_overrides(self):
        settings = load_settings(concurrent=True, failure_preview=3)
        assert settings.concurrent is True
        assert settings.failure_preview == 3
