"""
Tests for settings and .env loading.
"""

import os
from pathlib import Path

import pytest

from ratingscout.config import Settings, load_settings
from ratingscout.env import load_env


class TestLoadSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.max_results == 10
        assert settings.store_path == Path("data/current.json")

    def test_overrides(self):
        settings = load_settings({
            "RATINGSCOUT_TIMEOUT": "5",
            "RATINGSCOUT_MAX_RETRIES": "1",
            "RATINGSCOUT_RETRY_DELAY": "0.5",
            "RATINGSCOUT_USER_AGENT": "test-agent",
            "RATINGSCOUT_MAX_RESULTS": "3",
            "RATINGSCOUT_STORE": "/tmp/slot.json",
            "RATINGSCOUT_LOG_LEVEL": "debug",
            "RATINGSCOUT_LOG_DIR": "/tmp/logs",
        })
        assert settings.timeout == 5.0
        assert settings.max_retries == 1
        assert settings.retry_delay == 0.5
        assert settings.user_agent == "test-agent"
        assert settings.max_results == 3
        assert settings.store_path == Path("/tmp/slot.json")
        assert settings.log_level == "DEBUG"
        assert settings.log_dir == Path("/tmp/logs")

    def test_blank_values_use_defaults(self):
        assert load_settings({"RATINGSCOUT_TIMEOUT": " "}).timeout == Settings().timeout

    def test_invalid_number(self):
        with pytest.raises(ValueError, match="RATINGSCOUT_MAX_RETRIES"):
            load_settings({"RATINGSCOUT_MAX_RETRIES": "three"})

    def test_negative_number(self):
        with pytest.raises(ValueError, match="RATINGSCOUT_TIMEOUT"):
            load_settings({"RATINGSCOUT_TIMEOUT": "-1"})


class TestLoadEnv:
    """Test .env file loading."""

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_loads_values(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RATINGSCOUT_MAX_RESULTS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("RATINGSCOUT_MAX_RESULTS=4\n")

        assert load_env(env_file) is True
        assert os.environ["RATINGSCOUT_MAX_RESULTS"] == "4"
        monkeypatch.delenv("RATINGSCOUT_MAX_RESULTS")

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RATINGSCOUT_MAX_RESULTS", "7")
        env_file = tmp_path / ".env"
        env_file.write_text("RATINGSCOUT_MAX_RESULTS=4\n")

        load_env(env_file)

        assert os.environ["RATINGSCOUT_MAX_RESULTS"] == "7"
