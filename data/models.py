"""
Data Models for the Story Reader Application

This module contains the enums and data classes shared by the request builder,
the normalizer, the content service and the incremental loader.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from config import settings


class SortMode(str, Enum):
    """Listing order requested from the upstream API."""
    HOT = "hot"
    NEW = "new"
    TOP = "top"
    RISING = "rising"


class TimeWindow(str, Enum):
    """Time window for top listings and searches."""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class SourceScope(str, Enum):
    """Whether a request addresses one subreddit's listing or the global search."""
    SINGLE_SOURCE = "single-source"
    SEARCH = "search"


def normalize_limit(limit: Optional[int]) -> int:
    """Missing or non-positive limits fall back to the default; large ones are capped."""
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return settings.DEFAULT_LIMIT
    if limit < 1:
        return settings.DEFAULT_LIMIT
    return min(limit, settings.MAX_LIMIT)


@dataclass(frozen=True)
class RequestSpec:
    """Immutable description of a single fetch call.

    Attributes:
        source_scope: Single subreddit listing or global search.
        sort_mode: Listing order.
        time_window: Only sent for ``top`` listings and for searches.
        limit: Page size, normalized on construction.
        cursor: Continuation token from a previous page (``after``).
        query: Free-text search query.
        source_name: Subreddit to list. With single-source scope and no name,
            the request means the curated fallback cascade.
    """
    source_scope: SourceScope = SourceScope.SINGLE_SOURCE
    sort_mode: SortMode = SortMode.HOT
    time_window: Optional[TimeWindow] = None
    limit: int = 25
    cursor: Optional[str] = None
    query: Optional[str] = None
    source_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "source_scope", SourceScope(self.source_scope))
        object.__setattr__(self, "sort_mode", SortMode(self.sort_mode))
        if self.time_window:
            object.__setattr__(self, "time_window", TimeWindow(self.time_window))
        else:
            object.__setattr__(self, "time_window", None)
        object.__setattr__(self, "limit", normalize_limit(self.limit))
        object.__setattr__(self, "cursor", self.cursor or None)
        object.__setattr__(self, "query", (self.query or "").strip() or None)
        object.__setattr__(self, "source_name", self.source_name or None)


@dataclass(frozen=True)
class ContentItem:
    """A normalized story ready for display."""
    id: str
    title: str
    body_text: str
    author: str
    created_at: datetime               # UTC, from created_utc
    score: int
    comment_count: int
    source_name: str                   # Subreddit without the r/ prefix
    permalink: str                     # Relative path on the upstream site
    estimated_reading_minutes: int
    url: str = ""                      # External link, may point back at the post
    is_nsfw: bool = False

    @property
    def created_at_ms(self) -> int:
        """Millisecond-resolution creation timestamp."""
        return int(self.created_at.timestamp() * 1000)

    @property
    def canonical_url(self) -> str:
        """Absolute URL of the post on the upstream site."""
        if not self.permalink:
            return self.url
        return f"{settings.REDDIT_BASE_URL}{self.permalink}"


@dataclass
class FetchResult:
    """One page of normalized stories.

    An absent ``next_cursor`` or an empty ``items`` list ends pagination.
    """
    items: List[ContentItem] = field(default_factory=list)
    next_cursor: Optional[str] = None
    previous_cursor: Optional[str] = None
    count: int = 0
    is_sample: bool = False

    @property
    def has_more(self) -> bool:
        return bool(self.next_cursor) and bool(self.items)


@dataclass
class SourceInfo:
    """Metadata about a subreddit from its ``about`` endpoint."""
    name: str
    title: str
    description: str
    subscribers: int
    active_users: int
    is_nsfw: bool
    created_at: Optional[datetime] = None
