"""
Shared Test Fixtures for the Story Reader Application

This module provides common fixtures used across all test modules.
Fixtures include HTTP response and session mocks, log capture, and data
factories for upstream posts and listings.
"""

import pytest
from unittest.mock import MagicMock
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("stories")
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data={'key': 'value'})

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Any = None,
        url: str = 'https://www.reddit.com',
    ) -> MagicMock:
        """
        Create a mock HTTP response object.

        Args:
            status_code: HTTP status code (default 200).
            json_data: Value to return from response.json(); None makes json() raise.
            url: The URL of the response.

        Returns:
            MagicMock: A mock response object mimicking requests.Response.
        """
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.url = url
        mock_response.ok = 200 <= status_code < 300

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        return mock_response

    return _create_response


@pytest.fixture
def mock_session():
    """
    Mock HTTP session for the access cascade.

    Configure ``mock_session.get.side_effect`` with responses or exceptions
    in the order the cascade will request them.

    Returns:
        MagicMock: A mock with a ``get`` method.
    """
    return MagicMock()


# =============================================================================
# Data Factories
# =============================================================================

@pytest.fixture
def post_factory():
    """
    Factory fixture for creating upstream post ``data`` dictionaries.

    Usage:
        def test_normalize(post_factory):
            post = post_factory(id='abc', stickied=True)

    Returns:
        callable: A factory function for creating post dictionaries.
    """
    def _create_post(
        id: str = 'abc123',
        title: Optional[str] = 'The Thing in the Attic',
        selftext: Optional[str] = 'I heard scratching above my bedroom every night.',
        author: str = 'throwaway_ghost',
        created_utc: float = 1700000000.0,
        score: int = 512,
        num_comments: int = 42,
        subreddit: str = 'nosleep',
        permalink: Optional[str] = None,
        url: Optional[str] = None,
        stickied: bool = False,
        over_18: bool = False,
        **extra
    ) -> Dict[str, Any]:
        permalink = permalink if permalink is not None else f'/r/{subreddit}/comments/{id}/story/'
        url = url if url is not None else f'https://www.reddit.com{permalink}'
        post = {
            'id': id,
            'title': title,
            'selftext': selftext,
            'author': author,
            'created_utc': created_utc,
            'score': score,
            'num_comments': num_comments,
            'subreddit': subreddit,
            'permalink': permalink,
            'url': url,
            'stickied': stickied,
            'over_18': over_18,
        }
        post.update(extra)
        return post

    return _create_post


@pytest.fixture
def listing_factory(post_factory):
    """
    Factory fixture for creating upstream listing payloads.

    Usage:
        def test_listing(listing_factory, post_factory):
            payload = listing_factory([post_factory(id='a')], after='t3_a')

    Returns:
        callable: A factory function for creating listing dictionaries.
    """
    def _create_listing(
        posts: Optional[List[Dict[str, Any]]] = None,
        after: Optional[str] = 't3_next',
        before: Optional[str] = None,
    ) -> Dict[str, Any]:
        if posts is None:
            posts = [post_factory(id='p1'), post_factory(id='p2', title='Knocking at 3 AM')]
        return {
            'kind': 'Listing',
            'data': {
                'children': [{'kind': 't3', 'data': post} for post in posts],
                'after': after,
                'before': before,
            }
        }

    return _create_listing


@pytest.fixture
def mock_access():
    """
    Mock JsonFetcher for ContentFetcher tests.

    Returns:
        MagicMock: A mock with a ``get_json`` method.
    """
    return MagicMock()
