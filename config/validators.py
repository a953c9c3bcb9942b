"""
Configuration Validation for the Story Reader Application

This module contains configuration validation logic.
Kept apart from settings.py so settings stay a plain module of constants.
"""

from data.models import SortMode, TimeWindow
from utils.exceptions import ConfigurationError
from utils.helpers import is_valid_url

VALID_SORTS = tuple(mode.value for mode in SortMode)
VALID_TIME_FILTERS = tuple(window.value for window in TimeWindow)


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    if not is_valid_url(settings.REDDIT_BASE_URL):
        errors.append(f"REDDIT_BASE_URL is not a valid URL: {settings.REDDIT_BASE_URL!r}")

    for proxy in settings.CORS_PROXIES:
        if not is_valid_url(proxy):
            errors.append(f"CORS_PROXIES entry is not a valid URL prefix: {proxy!r}")

    if not settings.PREFER_DIRECT_ACCESS and not settings.CORS_PROXIES:
        errors.append("Direct access is disabled and no CORS_PROXIES are configured. "
                      "At least one access strategy is required.")

    if not settings.PARANORMAL_SUBREDDITS:
        errors.append("PARANORMAL_SUBREDDITS must contain at least one subreddit")

    if not settings.PRIMARY_SUBREDDIT:
        errors.append("PRIMARY_SUBREDDIT must not be empty")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("DEFAULT_LIMIT", settings.DEFAULT_LIMIT, 1, settings.MAX_LIMIT),
        ("FALLBACK_SUBREDDIT_LIMIT", settings.FALLBACK_SUBREDDIT_LIMIT, 1, settings.MAX_LIMIT),
        ("WORDS_PER_MINUTE", settings.WORDS_PER_MINUTE, 1, 2000),
        ("EXCERPT_LENGTH", settings.EXCERPT_LENGTH, 10, 10000),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.REQUEST_TIMEOUT <= 0:
        errors.append(f"REQUEST_TIMEOUT must be positive, got {settings.REQUEST_TIMEOUT}")

    if settings.DEFAULT_SORT not in VALID_SORTS:
        errors.append(f"DEFAULT_SORT must be one of {', '.join(VALID_SORTS)}, got {settings.DEFAULT_SORT!r}")

    if settings.DEFAULT_TIME_FILTER not in VALID_TIME_FILTERS:
        errors.append(f"DEFAULT_TIME_FILTER must be one of {', '.join(VALID_TIME_FILTERS)}, "
                      f"got {settings.DEFAULT_TIME_FILTER!r}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True
