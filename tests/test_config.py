"""
Tests for Configuration, Logging and Helpers

Tests cover settings validation, the configuration summary, logger setup
and the small helper functions used by the normalizer and the CLI.
"""

import logging
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings
from config.validators import validate_settings
from utils.exceptions import ConfigurationError
from utils.helpers import format_age, from_epoch_seconds, safe_get, split_list, to_int, truncate_text
from utils.logger import APP_LOGGER_NAME, CustomFormatter, get_logger, setup_file_logging


# =============================================================================
# Settings Validation Tests
# =============================================================================

class TestValidateSettings:
    """Tests for validate_settings."""

    def test_defaults_are_valid(self):
        assert validate_settings() is True

    def test_invalid_base_url(self):
        with patch.object(settings, 'REDDIT_BASE_URL', 'not-a-url'):
            with pytest.raises(ConfigurationError, match="REDDIT_BASE_URL"):
                validate_settings()

    def test_invalid_proxy(self):
        with patch.object(settings, 'CORS_PROXIES', ['https://ok.example/?', 'nope']):
            with pytest.raises(ConfigurationError, match="CORS_PROXIES"):
                validate_settings()

    def test_no_access_strategy(self):
        with patch.object(settings, 'PREFER_DIRECT_ACCESS', False), \
             patch.object(settings, 'CORS_PROXIES', []):
            with pytest.raises(ConfigurationError, match="access strategy"):
                validate_settings()

    def test_collects_all_errors(self):
        with patch.object(settings, 'DEFAULT_LIMIT', 0), \
             patch.object(settings, 'DEFAULT_SORT', 'best'), \
             patch.object(settings, 'PARANORMAL_SUBREDDITS', []):
            with pytest.raises(ConfigurationError) as exc_info:
                validate_settings()

        message = str(exc_info.value)
        assert "DEFAULT_LIMIT" in message
        assert "DEFAULT_SORT" in message
        assert "PARANORMAL_SUBREDDITS" in message

    def test_config_summary(self):
        summary = settings.get_config_summary()

        assert summary["sources"]["primary"] == settings.PRIMARY_SUBREDDIT
        assert summary["upstream"]["relays"] == len(settings.CORS_PROXIES)


# =============================================================================
# Logger Tests
# =============================================================================

class TestLogger:
    """Tests for logger setup."""

    def test_child_loggers_share_console_handler(self):
        first = get_logger("services.one")
        second = get_logger("services.two")

        app_logger = logging.getLogger(APP_LOGGER_NAME)
        console = [h for h in app_logger.handlers if isinstance(h.formatter, CustomFormatter)]
        assert first.name == "stories.services.one"
        assert second.parent.name in ("stories.services", "stories")
        assert len(console) == 1

    def test_formatter_colours_by_level(self):
        record = logging.LogRecord("stories", logging.WARNING, __file__, 1, "spooky", None, None)

        formatted = CustomFormatter().format(record)

        assert formatted.startswith(CustomFormatter.yellow)
        assert "spooky" in formatted

    def test_file_handler_added_once_per_path(self, tmp_path):
        log_file = str(tmp_path / "stories.log")
        app_logger = logging.getLogger(APP_LOGGER_NAME)

        setup_file_logging(log_file, logging.INFO)
        setup_file_logging(log_file, logging.DEBUG)

        handlers = [h for h in app_logger.handlers
                    if isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)]
        try:
            assert len(handlers) == 1
            assert handlers[0].level == logging.DEBUG
        finally:
            for handler in handlers:
                app_logger.removeHandler(handler)
                handler.close()
            app_logger.setLevel(logging.INFO)


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    """Tests for helper functions."""

    def test_safe_get(self):
        assert safe_get({"a": {"b": [1, 2]}}, "a", "b", 1) == 2
        assert safe_get({"a": None}, "a", "b", default="x") == "x"

    def test_to_int(self):
        assert to_int("7") == 7
        assert to_int(None) == 0
        assert to_int("abc", default=-1) == -1

    def test_from_epoch_seconds(self):
        assert from_epoch_seconds(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert from_epoch_seconds(None).tzinfo == timezone.utc

    def test_format_age(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)

        assert format_age(now - timedelta(seconds=10), now) == "just now"
        assert format_age(now - timedelta(hours=3), now) == "3h ago"
        assert format_age(now - timedelta(days=2), now) == "2d ago"

    def test_truncate_text(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a long ghost story", 6) == "a long..."

    def test_split_list(self):
        assert split_list(" a, b ,,c ") == ["a", "b", "c"]
        assert split_list(None) == []
