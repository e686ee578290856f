"""Tests for keyward.config: environment-driven configuration."""

import logging
from pathlib import Path

import pytest

from keyward.config import DEFAULT_MAX_LINE_BYTES, Config, get_config, reset_config


@pytest.fixture(autouse=True)
def clean_config(clean_env):
    """Reset config singleton and KEYWARD_* variables between tests."""
    yield


class TestConfig:
    def test_defaults(self):
        cfg = get_config()
        assert cfg.mapping_file == Path(".keyward.yml")
        assert cfg.log_level == "WARNING"
        assert cfg.max_line_bytes == DEFAULT_MAX_LINE_BYTES == 10 * 1024 * 1024

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("KEYWARD_CONFIG", "/etc/keyward.yml")
        monkeypatch.setenv("KEYWARD_LOG_LEVEL", "debug")
        monkeypatch.setenv("KEYWARD_MAX_LINE_BYTES", "1024")
        cfg = get_config()
        assert cfg.mapping_file == Path("/etc/keyward.yml")
        assert cfg.log_level_number == logging.DEBUG
        assert cfg.max_line_bytes == 1024

    def test_singleton(self):
        assert get_config() is get_config()

    def test_reset(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("KEYWARD_CONFIG", "other.yml")
        reset_config()
        assert get_config() is not first
        assert get_config().mapping_file == Path("other.yml")

    def test_unknown_level_falls_back(self):
        assert Config(log_level="chatty").log_level_number == logging.WARNING

    def test_frozen(self):
        with pytest.raises(AttributeError):
            get_config().log_level = "DEBUG"  # type: ignore[misc]
