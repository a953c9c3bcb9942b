"""
Content Service Module

This module fetches paranormal and horror stories from the upstream API.
It provides the single-source and search primitives, which raise on failure,
and the curated story cascade, which degrades from the primary subreddit to a
keyword search, then to secondary subreddits, and finally to sample stories,
so it never raises.
"""

from functools import partial
from typing import Optional, Sequence

from config import settings
from data.models import (
    FetchResult, RequestSpec, SortMode, SourceInfo, SourceScope, TimeWindow
)
from data.sample_stories import sample_listing
from services.access_service import AccessStrategyCascade
from services.cascade import Attempt, first_success
from services.normalizer import normalize, normalize_source_info
from services.protocols import JsonFetcher
from services.request_builder import build_about_endpoint, build_request_url, build_target
from utils.exceptions import AllSourcesExhausted, FetchError
from utils.logger import get_logger

logger = get_logger(__name__)


class ContentFetcher:
    """Service for fetching and normalizing stories from the upstream API."""

    def __init__(
        self,
        access: Optional[JsonFetcher] = None,
        base_url: Optional[str] = None,
        allowed_sources: Optional[Sequence[str]] = None,
        primary_source: Optional[str] = None,
        secondary_sources: Optional[Sequence[str]] = None,
        fallback_query: Optional[str] = None,
    ):
        """
        Initialize the content fetcher.

        Args:
            access: Executes requests; defaults to an AccessStrategyCascade with its own state.
            base_url: Upstream base URL (defaults to settings.REDDIT_BASE_URL).
            allowed_sources: Subreddits searches are confined to.
            primary_source: First subreddit tried by the curated cascade.
            secondary_sources: Subreddits retried one by one after search fails.
            fallback_query: Keyword query used by the curated cascade.
        """
        self.access = access or AccessStrategyCascade()
        self.base_url = (base_url or settings.REDDIT_BASE_URL).rstrip("/")
        self.allowed_sources = list(allowed_sources or settings.PARANORMAL_SUBREDDITS)
        self.primary_source = primary_source or settings.PRIMARY_SUBREDDIT
        self.secondary_sources = list(
            settings.SECONDARY_SUBREDDITS if secondary_sources is None else secondary_sources
        )
        self.fallback_query = fallback_query or settings.FALLBACK_SEARCH_QUERY

    # =========================================================================
    # Primitives
    # =========================================================================

    def fetch(self, spec: RequestSpec) -> FetchResult:
        """
        Fetch one page of stories described by a RequestSpec.

        Search requests and requests naming a subreddit go straight to the
        upstream API and raise on failure. A single-source request without a
        subreddit means curated stories and never raises.
        """
        if spec.source_scope == SourceScope.SEARCH or spec.source_name:
            url = build_request_url(self.base_url, spec, self.allowed_sources)
            logger.debug(f"Requesting {url}")
            return normalize(self.access.get_json(url))

        return self.get_stories(spec.sort_mode, spec.time_window, spec.limit, spec.cursor)

    def fetch_from_source(
        self,
        source_name: str,
        sort: SortMode = SortMode.HOT,
        time_window: Optional[TimeWindow] = TimeWindow.WEEK,
        limit: int = 25,
        cursor: Optional[str] = None,
    ) -> FetchResult:
        """
        Fetch stories from one subreddit.

        Raises:
            FetchError: If the listing cannot be fetched or is malformed.
        """
        return self.fetch(RequestSpec(
            source_scope=SourceScope.SINGLE_SOURCE,
            source_name=source_name,
            sort_mode=sort,
            time_window=time_window,
            limit=limit,
            cursor=cursor,
        ))

    def search_stories(
        self,
        query: Optional[str] = settings.DEFAULT_SEARCH_QUERY,
        sort: SortMode = SortMode.TOP,
        time_window: Optional[TimeWindow] = TimeWindow.MONTH,
        limit: int = 25,
        cursor: Optional[str] = None,
    ) -> FetchResult:
        """
        Search the curated subreddits for stories matching a query.

        Raises:
            FetchError: If the search cannot be fetched or is malformed.
        """
        return self.fetch(RequestSpec(
            source_scope=SourceScope.SEARCH,
            query=query,
            sort_mode=sort,
            time_window=time_window,
            limit=limit,
            cursor=cursor,
        ))

    # =========================================================================
    # Curated Story Cascade
    # =========================================================================

    def get_stories(
        self,
        sort: SortMode = SortMode.HOT,
        time_window: Optional[TimeWindow] = TimeWindow.WEEK,
        limit: int = 25,
        cursor: Optional[str] = None,
    ) -> FetchResult:
        """
        Fetch curated stories, degrading through fallbacks until something loads.

        Order: the primary subreddit; a keyword search across the allow-list;
        each secondary subreddit with a reduced page size; the sample stories.

        Returns:
            FetchResult: Never raises. Sample results carry ``is_sample=True``.
        """
        fallback_limit = min(limit, settings.FALLBACK_SUBREDDIT_LIMIT)
        attempts = [
            Attempt(f"r/{self.primary_source}", partial(
                self.fetch_from_source, self.primary_source, sort, time_window, limit, cursor)),
            Attempt("search", partial(
                self.search_stories, self.fallback_query, sort, time_window, limit, cursor)),
        ]
        attempts.extend(
            Attempt(f"r/{name}", partial(
                self.fetch_from_source, name, sort, time_window, fallback_limit, cursor))
            for name in self.secondary_sources
        )

        # Any error counts as a failed stage here; the top-level operation must not raise
        outcome = first_success(
            attempts,
            on_failure=self._log_stage_failure,
            on_success=lambda attempt: logger.info(f"Loaded stories from {attempt.name}"),
            errors=(Exception,),
        )
        if outcome.ok:
            return outcome.value

        reasons = "; ".join(f"{name}: {error}" for name, error in outcome.failures)
        exhausted = AllSourcesExhausted(
            f"All story sources failed ({reasons})",
            failures=outcome.failures
        )
        logger.warning(f"{exhausted}; returning sample stories")
        return self.get_sample_stories()

    def _log_stage_failure(self, attempt: Attempt, error: Exception) -> None:
        if isinstance(error, FetchError):
            logger.warning(f"Failed to fetch stories from {attempt.name}: {error}")
        else:
            logger.error(f"Unexpected error fetching stories from {attempt.name}: {error}", exc_info=error)

    def get_sample_stories(self) -> FetchResult:
        """Return the fixed sample stories with no pagination cursor."""
        result = normalize(sample_listing())
        result.is_sample = True
        return result

    # =========================================================================
    # Presets
    # =========================================================================

    def get_trending_stories(self, limit: int = 25, cursor: Optional[str] = None) -> FetchResult:
        """Hot stories from the last day."""
        return self.get_stories(SortMode.HOT, TimeWindow.DAY, limit, cursor)

    def get_top_stories(
        self,
        time_window: TimeWindow = TimeWindow.WEEK,
        limit: int = 25,
        cursor: Optional[str] = None,
    ) -> FetchResult:
        """Top stories over a time window."""
        return self.get_stories(SortMode.TOP, time_window, limit, cursor)

    def get_new_stories(self, limit: int = 25, cursor: Optional[str] = None) -> FetchResult:
        """Newest stories."""
        return self.get_stories(SortMode.NEW, None, limit, cursor)

    # =========================================================================
    # Subreddit Metadata
    # =========================================================================

    def get_source_info(self, source_name: str) -> Optional[SourceInfo]:
        """
        Fetch metadata about a subreddit.

        Returns:
            Optional[SourceInfo]: The metadata, or None if it could not be fetched.
        """
        url = build_target(self.base_url, build_about_endpoint(source_name))
        try:
            return normalize_source_info(self.access.get_json(url))
        except FetchError as e:
            logger.warning(f"Failed to fetch info for r/{source_name}: {e}")
            return None


_default_fetcher: Optional[ContentFetcher] = None


def get_default_fetcher() -> ContentFetcher:
    """Return the process-wide fetcher, creating it on first use."""
    global _default_fetcher
    if _default_fetcher is None:
        _default_fetcher = ContentFetcher()
    return _default_fetcher


def fetch_stories(
    sort: str = settings.DEFAULT_SORT,
    time_filter: Optional[str] = settings.DEFAULT_TIME_FILTER,
    limit: int = settings.DEFAULT_LIMIT,
    after: Optional[str] = None,
    query: Optional[str] = None,
    source_name: Optional[str] = None,
    fetcher: Optional[ContentFetcher] = None,
) -> FetchResult:
    """
    Fetch a page of stories.

    A query searches the curated subreddits, a source name lists that one
    subreddit, and with neither the curated stories are returned. Searches and
    single-subreddit listings raise FetchError on failure; curated stories never raise.
    """
    fetcher = fetcher or get_default_fetcher()
    query = (query or "").strip() or None
    spec = RequestSpec(
        source_scope=SourceScope.SEARCH if query else SourceScope.SINGLE_SOURCE,
        sort_mode=sort,
        time_window=time_filter,
        limit=limit,
        cursor=after,
        query=query,
        source_name=None if query else (source_name or "").strip() or None,
    )
    return fetcher.fetch(spec)
