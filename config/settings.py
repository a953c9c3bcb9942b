"""
Configuration Settings for the Paranormal Story Reader

This module centralizes all configuration settings for the Story Reader application,
including environment variables, upstream endpoints, relays, and content constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from utils.helpers import split_list

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable with fallback."""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get float value from environment variable with fallback."""
    try:
        return float(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable with fallback."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_env_list(key: str, default: list) -> list:
    """Get comma-separated list value from environment variable with fallback."""
    return split_list(os.getenv(key)) or list(default)


# =============================================================================
# Upstream API Settings
# =============================================================================

REDDIT_BASE_URL = os.getenv("REDDIT_BASE_URL", "https://www.reddit.com").rstrip("/")

# Relays are tried in this order once direct access has failed.
# Each prefix is followed by the percent-encoded target URL.
CORS_PROXIES = _get_env_list("CORS_PROXIES", [
    "https://api.allorigins.win/get?url=",
    "https://corsproxy.io/?",
    "https://cors-anywhere.herokuapp.com/",
])

PREFER_DIRECT_ACCESS = _get_env_bool("PREFER_DIRECT_ACCESS", True)
REQUEST_TIMEOUT = _get_env_float("REQUEST_TIMEOUT", 15.0)   # Seconds per attempt

USER_AGENT = os.getenv(
    "USER_AGENT",
    "python:paranormal-story-reader:1.0 (read-only story browser)"
)
REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}

# =============================================================================
# Content Source Settings
# =============================================================================

# Search results are always confined to this allow-list
PARANORMAL_SUBREDDITS = _get_env_list("PARANORMAL_SUBREDDITS", [
    "nosleep",
    "paranormal",
    "LetsNotMeet",
    "creepy",
    "shortscarystories",
    "TwoSentenceHorror",
    "Paranormal_Evidence",
    "Ghosts",
    "Horror_stories",
    "scarystories",
])

PRIMARY_SUBREDDIT = os.getenv("PRIMARY_SUBREDDIT", "nosleep")   # Most populated source
SECONDARY_SUBREDDITS = _get_env_list("SECONDARY_SUBREDDITS", ["paranormal", "creepy", "LetsNotMeet"])

DEFAULT_SEARCH_QUERY = "horror scary paranormal ghost"
FALLBACK_SEARCH_QUERY = "horror scary paranormal ghost supernatural creepy"

# =============================================================================
# Listing Settings
# =============================================================================

DEFAULT_LIMIT = _get_env_int("DEFAULT_LIMIT", 25)
MAX_LIMIT = 100                      # Upstream maximum page size
FALLBACK_SUBREDDIT_LIMIT = 10        # Page size when retrying secondary sources
DEFAULT_SORT = os.getenv("DEFAULT_SORT", "hot")
DEFAULT_TIME_FILTER = os.getenv("DEFAULT_TIME_FILTER", "week")

# =============================================================================
# Normalization and Display Settings
# =============================================================================

WORDS_PER_MINUTE = 200
REMOVED_SENTINEL = "[removed]"
EXCERPT_LENGTH = _get_env_int("EXCERPT_LENGTH", 280)

# =============================================================================
# Logging Settings
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "story_reader.log")


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration.
    Useful for logging startup state.
    """
    return {
        "upstream": {
            "base_url": REDDIT_BASE_URL,
            "prefer_direct": PREFER_DIRECT_ACCESS,
            "relays": len(CORS_PROXIES),
            "timeout": REQUEST_TIMEOUT,
        },
        "sources": {
            "primary": PRIMARY_SUBREDDIT,
            "secondary": list(SECONDARY_SUBREDDITS),
            "allow_list_size": len(PARANORMAL_SUBREDDITS),
        },
        "listing": {
            "default_limit": DEFAULT_LIMIT,
            "default_sort": DEFAULT_SORT,
            "default_time_filter": DEFAULT_TIME_FILTER,
        },
    }
