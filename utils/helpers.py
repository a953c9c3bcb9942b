"""
Helper Utility Module

This module provides various helper functions used throughout the Story Reader application.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    if add_ellipsis:
        truncated += "..."

    return truncated


def safe_get(data: Dict[str, Any], *keys, default: Any = None) -> Any:
    """
    Safely get a value from a nested dictionary.

    Args:
        data: The dictionary to search
        *keys: The keys to follow
        default: Default value if key doesn't exist

    Returns:
        The value at the specified keys or the default value
    """
    for key in keys:
        try:
            data = data[key]
        except (KeyError, TypeError, IndexError):
            return default
    return data


def to_int(value: Any, default: int = 0) -> int:
    """Coerce an upstream numeric field to int, falling back to ``default``."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def from_epoch_seconds(value: Any) -> datetime:
    """
    Convert an epoch-seconds value to a UTC datetime.

    Args:
        value: Epoch seconds (int, float or numeric string), or None

    Returns:
        UTC datetime, or the current UTC time if the value is missing or invalid
    """
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.now(timezone.utc)


def format_age(created_at: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a timestamp was, e.g. ``"3h ago"``.

    Args:
        created_at: Timezone-aware timestamp
        now: Reference time (defaults to the current UTC time)

    Returns:
        str: A short relative age
    """
    now = now or datetime.now(timezone.utc)
    seconds = max(0, int((now - created_at).total_seconds()))

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    if seconds < 86400 * 30:
        return f"{seconds // 86400}d ago"
    if seconds < 86400 * 365:
        return f"{seconds // (86400 * 30)}mo ago"
    return f"{seconds // (86400 * 365)}y ago"


def split_list(value: Optional[str], separator: str = ",") -> List[str]:
    """Split a separated string into a list of stripped, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(separator) if item.strip()]
