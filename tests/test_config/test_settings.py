"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from trustlens.alerts.config import AlertConfig
from trustlens.config.settings import Settings, get_settings
from trustlens.workflow.config import WorkflowConfig


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.environment == "development"
        assert settings.events_channel == "trustlens:events"
        assert not settings.is_production

    def test_fixture(self, test_settings):
        assert test_settings.log_level == "DEBUG"
        assert str(test_settings.redis_url).endswith("/1")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("EVENTS_CHANNEL", "prod:events")

        settings = get_settings()

        assert settings.is_production
        assert settings.events_channel == "prod:events"

    def test_cached(self):
        assert get_settings() is get_settings()


class TestComponentConfigs:
    def test_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_QUORUM", "5")
        monkeypatch.setenv("ALERTS_DEDUP_TTL_HOURS", "12")

        assert WorkflowConfig().quorum == 5
        assert AlertConfig().dedup_ttl_hours == 12

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("QUORUM", "9")
        assert WorkflowConfig().quorum == 3


class TestValidation:
    def test_pool_bounds(self):
        with pytest.raises(ValidationError, match="db_pool_max_size"):
            Settings(db_pool_min_size=8, db_pool_max_size=4)

    def test_json_logs_follows_environment(self):
        assert Settings(environment="production").json_logs
        assert not Settings(environment="staging").json_logs
        assert Settings(log_format="json").json_logs
