"""
Incremental Loader Module

Holds the stories shown to the user together with the current sort, time
filter and search query, and the cursor for the next page. Loading replaces
the list; loading more appends to it.
"""

from dataclasses import dataclass, replace
from typing import List, Optional

from config import settings
from data.models import ContentItem
from services.content_service import fetch_stories
from services.protocols import StoryFetcher
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoaderOptions:
    """Current request options of the loader."""
    sort: str = settings.DEFAULT_SORT
    time_filter: Optional[str] = settings.DEFAULT_TIME_FILTER
    limit: int = settings.DEFAULT_LIMIT
    query: Optional[str] = None
    source_name: Optional[str] = None


class IncrementalLoader:
    """Keeps a growing list of stories and the pagination state behind it."""

    def __init__(self, fetcher: Optional[StoryFetcher] = None, options: Optional[LoaderOptions] = None):
        self.fetcher = fetcher or fetch_stories
        self.options = options or LoaderOptions()

        self.stories: List[ContentItem] = []
        self.loading = False
        self.error: Optional[str] = None
        self.has_more = True
        self.cursor: Optional[str] = None
        self.is_sample = False

    def load(self, reset: bool = True) -> None:
        """
        Load a page of stories.

        Args:
            reset: Replace the list with the first page when True; append the
                page after the current cursor when False.
        """
        self.loading = True
        self.error = None
        try:
            result = self.fetcher(
                sort=self.options.sort,
                time_filter=self.options.time_filter,
                limit=self.options.limit,
                after=None if reset else self.cursor,
                query=self.options.query,
                source_name=self.options.source_name,
            )

            if reset:
                self.stories = list(result.items)
            else:
                self.stories.extend(result.items)

            self.cursor = result.next_cursor
            self.has_more = result.has_more
            self.is_sample = result.is_sample
            logger.info(f"Loaded {result.count} stories ({len(self.stories)} total)")

        except Exception as e:
            logger.error(f"Error loading stories: {e}")
            self.error = str(e) or "Failed to load stories"
            # A failed first load leaves an empty list rather than stale stories
            if reset:
                self.stories = []
                self.has_more = False

        finally:
            self.loading = False

    def load_more(self) -> None:
        """Append the next page, unless a load is running or there is nothing more."""
        if not self.loading and self.has_more:
            self.load(reset=False)

    def refresh(self) -> None:
        """Reload the first page with the current options."""
        self.cursor = None
        self.load(reset=True)

    def update_options(self, **changes) -> None:
        """Change request options, reset the cursor and reload."""
        self.options = replace(self.options, **changes)
        self.cursor = None
        self.load(reset=True)

    def search(self, query: Optional[str]) -> None:
        self.update_options(query=query or None)

    def change_sort(self, sort: str) -> None:
        self.update_options(sort=sort)

    def change_time_filter(self, time_filter: Optional[str]) -> None:
        self.update_options(time_filter=time_filter)

    def change_source(self, source_name: Optional[str]) -> None:
        self.update_options(source_name=source_name or None)
