"""
Tests for the Incremental Loader

Unit tests covering:
- Initial load and list replacement
- Load-more appending and cursor handling
- Option changes (search, sort, time filter, subreddit) resetting pagination
- Single-subreddit listings and their failures
- Error capture
"""

import pytest
from functools import partial
from unittest.mock import MagicMock
from urllib.parse import urlsplit
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import FetchResult
from services.content_service import ContentFetcher, fetch_stories
from services.incremental_loader import IncrementalLoader, LoaderOptions
from services.normalizer import normalize
from utils.exceptions import AllStrategiesExhausted, HttpStatusError


@pytest.fixture
def page_factory(listing_factory, post_factory):
    """Factory for FetchResult pages with the given ids and cursor."""
    def _create_page(ids, after=None):
        return normalize(listing_factory([post_factory(id=i) for i in ids], after=after))
    return _create_page


@pytest.fixture
def story_fetcher():
    """Mock StoryFetcher callable."""
    return MagicMock()


@pytest.fixture
def loader(story_fetcher):
    return IncrementalLoader(
        fetcher=story_fetcher,
        options=LoaderOptions(sort="hot", time_filter="week", limit=2, query=None),
    )


def ids(loader):
    return [story.id for story in loader.stories]


class TestLoad:
    """Tests for loading and appending pages."""

    def test_initial_load(self, loader, story_fetcher, page_factory):
        """The first page replaces the list and stores the cursor."""
        story_fetcher.return_value = page_factory(["a", "b"], after="t3_b")

        loader.load()

        story_fetcher.assert_called_once_with(sort="hot", time_filter="week", limit=2, after=None, query=None, source_name=None)
        assert ids(loader) == ["a", "b"]
        assert loader.cursor == "t3_b"
        assert loader.has_more is True
        assert loader.loading is False
        assert loader.error is None

    def test_load_more_appends(self, loader, story_fetcher, page_factory):
        """Load-more passes the cursor and appends the next page."""
        story_fetcher.side_effect = [
            page_factory(["a", "b"], after="t3_b"),
            page_factory(["c", "d"], after=None),
        ]

        loader.load()
        loader.load_more()

        assert story_fetcher.call_args.kwargs["after"] == "t3_b"
        assert ids(loader) == ["a", "b", "c", "d"]
        assert loader.has_more is False

    def test_load_more_stops_at_end(self, loader, story_fetcher, page_factory):
        """No request is made once pagination has ended."""
        story_fetcher.return_value = page_factory(["a"], after=None)

        loader.load()
        loader.load_more()

        assert story_fetcher.call_count == 1

    def test_empty_page_ends_pagination(self, loader, story_fetcher):
        """An empty page ends pagination even with a cursor."""
        story_fetcher.return_value = FetchResult(items=[], next_cursor="t3_x", count=0)

        loader.load()

        assert loader.has_more is False

    def test_sample_results_are_flagged(self, loader, story_fetcher, page_factory):
        page = page_factory(["sample1"])
        page.is_sample = True
        story_fetcher.return_value = page

        loader.load()

        assert loader.is_sample is True


class TestOptions:
    """Tests for option changes."""

    def test_search_resets_and_reloads(self, loader, story_fetcher, page_factory):
        story_fetcher.side_effect = [
            page_factory(["a"], after="t3_a"),
            page_factory(["g1", "g2"], after="t3_g2"),
        ]

        loader.load()
        loader.search("ghost")

        assert story_fetcher.call_args.kwargs["query"] == "ghost"
        assert story_fetcher.call_args.kwargs["after"] is None
        assert ids(loader) == ["g1", "g2"]

    def test_clearing_search(self, loader, story_fetcher, page_factory):
        story_fetcher.return_value = page_factory(["a"])

        loader.search("")

        assert loader.options.query is None

    def test_change_sort_and_time_filter(self, loader, story_fetcher, page_factory):
        story_fetcher.return_value = page_factory(["a"])

        loader.change_sort("top")
        loader.change_time_filter("all")

        assert story_fetcher.call_args.kwargs["sort"] == "top"
        assert story_fetcher.call_args.kwargs["time_filter"] == "all"

    def test_change_source_resets_and_reloads(self, loader, story_fetcher, page_factory):
        story_fetcher.side_effect = [
            page_factory(["a"], after="t3_a"),
            page_factory(["c1"], after="t3_c1"),
        ]

        loader.load()
        loader.change_source("creepy")

        assert story_fetcher.call_args.kwargs["source_name"] == "creepy"
        assert story_fetcher.call_args.kwargs["after"] is None
        assert ids(loader) == ["c1"]

    def test_refresh_reloads_first_page(self, loader, story_fetcher, page_factory):
        story_fetcher.side_effect = [
            page_factory(["a"], after="t3_a"),
            page_factory(["b"], after="t3_b"),
            page_factory(["x"], after="t3_x"),
        ]

        loader.load()
        loader.load_more()
        loader.refresh()

        assert story_fetcher.call_args.kwargs["after"] is None
        assert ids(loader) == ["x"]


class TestErrors:
    """Tests for error capture."""

    def test_failed_first_load_clears_stories(self, loader, story_fetcher):
        story_fetcher.side_effect = AllStrategiesExhausted("All upstream requests failed. Last error: HTTP 503")

        loader.load()

        assert loader.stories == []
        assert "HTTP 503" in loader.error
        assert loader.loading is False

    def test_failed_load_more_keeps_stories(self, loader, story_fetcher, page_factory):
        story_fetcher.side_effect = [
            page_factory(["a"], after="t3_a"),
            AllStrategiesExhausted("All upstream requests failed. Last error: timeout"),
        ]

        loader.load()
        loader.load_more()

        assert ids(loader) == ["a"]
        assert loader.error is not None
        assert loader.cursor == "t3_a"


class TestSingleSubreddit:
    """Loader over a real ContentFetcher listing one subreddit."""

    @pytest.fixture
    def subreddit_loader(self, mock_access):
        fetcher = ContentFetcher(access=mock_access, primary_source="nosleep")
        return IncrementalLoader(
            fetcher=partial(fetch_stories, fetcher=fetcher),
            options=LoaderOptions(sort="top", time_filter="year", limit=5, source_name="creepy"),
        )

    def test_lists_named_subreddit(self, subreddit_loader, mock_access, listing_factory):
        mock_access.get_json.return_value = listing_factory()

        subreddit_loader.load()

        url = mock_access.get_json.call_args.args[0]
        assert urlsplit(url).path == "/r/creepy/top.json"
        assert subreddit_loader.is_sample is False
        assert len(subreddit_loader.stories) == 2

    def test_failure_lands_in_error_without_samples(self, subreddit_loader, mock_access):
        mock_access.get_json.side_effect = HttpStatusError("HTTP 404 from www.reddit.com", 404)

        subreddit_loader.load()

        assert mock_access.get_json.call_count == 1
        assert "HTTP 404" in subreddit_loader.error
        assert subreddit_loader.stories == []
        assert subreddit_loader.is_sample is False
