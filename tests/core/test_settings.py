"""Tests for core.settings module.

Covers:
- ErrchainSettings defaults
- Environment variable override (ERRCHAIN_ prefix)
- log_level validation
- Cached get_settings() / reset_settings()
"""

import pytest
from pydantic import ValidationError

from errchain.core.settings import ErrchainSettings, get_settings, reset_settings


class TestErrchainSettingsDefaults:
    def test_default_log_level(self):
        assert ErrchainSettings().log_level == "INFO"

    def test_default_json_logs_auto(self):
        assert ErrchainSettings().json_logs is None

    def test_default_service(self):
        assert ErrchainSettings().service == "errchain"

    def test_default_debug_false(self):
        s = ErrchainSettings()
        assert s.debug is False
        assert s.effective_level == "INFO"


class TestErrchainSettingsEnvOverride:
    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("ERRCHAIN_LOG_LEVEL", "warning")
        assert ErrchainSettings().log_level == "WARNING"

    def test_json_logs_from_env(self, monkeypatch):
        monkeypatch.setenv("ERRCHAIN_JSON_LOGS", "false")
        assert ErrchainSettings().json_logs is False

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert ErrchainSettings().log_level == "INFO"

    def test_debug_forces_debug_level(self, monkeypatch):
        monkeypatch.setenv("ERRCHAIN_DEBUG", "true")
        s = ErrchainSettings()
        assert s.log_level == "INFO"
        assert s.effective_level == "DEBUG"


class TestErrchainSettingsValidation:
    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            ErrchainSettings(log_level="LOUD")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset_rereads_env(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("ERRCHAIN_SERVICE", "other")
        reset_settings()
        second = get_settings()
        assert second is not first
        assert second.service == "other"
