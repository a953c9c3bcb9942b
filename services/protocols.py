"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for services used in the Story Reader
application. These protocols enable loose coupling, dependency injection, and easier testing.

Protocols defined:
- HttpSession: The part of requests.Session the access cascade relies on
- JsonFetcher: Interface for anything that turns a URL into a decoded payload
- StoryFetcher: Interface the IncrementalLoader uses to load pages of stories
"""

from typing import Any, Dict, Optional, Protocol

from data.models import FetchResult


class HttpSession(Protocol):
    """Protocol for the HTTP session used by the access cascade.

    requests.Session satisfies it; tests substitute a MagicMock.
    """

    def get(self, url: str, headers: Optional[Dict[str, str]] = None,
            timeout: Optional[float] = None) -> Any:
        """Issue a GET request and return a response with status_code and json()."""
        ...


class JsonFetcher(Protocol):
    """Protocol for components that fetch and decode a JSON document."""

    def get_json(self, target_url: str) -> Any:
        """Fetch a URL and return its decoded payload.

        Args:
            target_url: Fully-qualified upstream URL.

        Returns:
            The decoded payload.

        Raises:
            FetchError: If the document cannot be fetched or decoded.
        """
        ...


class StoryFetcher(Protocol):
    """Protocol defining how the IncrementalLoader asks for a page of stories."""

    def __call__(
        self,
        sort: str = "hot",
        time_filter: Optional[str] = "week",
        limit: int = 25,
        after: Optional[str] = None,
        query: Optional[str] = None,
        source_name: Optional[str] = None,
    ) -> FetchResult:
        """Fetch one page of stories.

        Args:
            sort: Listing order.
            time_filter: Time window for top listings and searches.
            limit: Page size.
            after: Cursor of the page to continue from.
            query: Free-text search; curated stories when absent.
            source_name: Subreddit to list instead of the curated stories.

        Returns:
            FetchResult for the requested page.
        """
        ...
