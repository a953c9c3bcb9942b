"""
Paranormal Story Reader

This is the main entry point for the Story Reader application.
It fetches paranormal and horror stories from Reddit, pages through them,
and prints each one as a story card.
"""

import sys
import argparse
import logging
from functools import partial
from typing import List, Optional

from config import settings
from config.validators import validate_settings
from data.models import ContentItem, SortMode, SourceInfo, TimeWindow
from services.content_service import ContentFetcher, fetch_stories
from services.incremental_loader import IncrementalLoader, LoaderOptions
from utils.exceptions import ConfigurationError
from utils.helpers import format_age, truncate_text
from utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)

SORT_CHOICES = [mode.value for mode in SortMode]
TIME_CHOICES = [window.value for window in TimeWindow]


def format_story_card(story: ContentItem, excerpt_length: Optional[int] = None) -> str:
    """
    Render a story as a plain-text card.

    Args:
        story: The story to render
        excerpt_length: Maximum characters of body text to show

    Returns:
        str: The multi-line card
    """
    excerpt_length = excerpt_length or settings.EXCERPT_LENGTH
    meta = [
        f"r/{story.source_name}",
        f"u/{story.author}",
        format_age(story.created_at),
        f"{story.score} points",
        f"{story.comment_count} comments",
    ]
    if story.estimated_reading_minutes:
        meta.append(f"{story.estimated_reading_minutes} min read")
    if story.is_nsfw:
        meta.append("NSFW")

    lines = [story.title, " · ".join(meta)]
    if story.body_text:
        excerpt = " ".join(story.body_text.split())
        lines.append(truncate_text(excerpt, excerpt_length))
    lines.append(story.canonical_url)
    return "\n".join(lines)


def format_source_info(info: SourceInfo) -> str:
    """Render subreddit metadata as a short block of text."""
    lines = [f"r/{info.name} - {info.title}" if info.title else f"r/{info.name}"]
    lines.append(f"{info.subscribers:,} members · {info.active_users:,} online")
    if info.description:
        lines.append(info.description)
    return "\n".join(lines)


class StoryReader:
    """
    Main application class for the Story Reader.

    This class drives an IncrementalLoader and prints what it holds.
    """

    def __init__(self, fetcher: Optional[ContentFetcher] = None, validate: bool = True, out=None):
        """
        Initialize the Story Reader application.

        Args:
            fetcher: Content fetcher to use (defaults to a new ContentFetcher)
            validate: Whether to validate settings on startup
            out: Stream for story output (defaults to stdout)
        """
        if validate:
            validate_settings()
        self.fetcher = fetcher or ContentFetcher()
        self.out = out or sys.stdout

    def run(self, options: LoaderOptions, pages: int = 1) -> bool:
        """
        Load and print up to ``pages`` pages of stories.

        Returns:
            bool: True if at least one story was printed, False otherwise
        """
        loader = IncrementalLoader(fetcher=partial(fetch_stories, fetcher=self.fetcher), options=options)
        loader.load()

        printed = 0
        for page in range(max(1, pages)):
            if page > 0:
                if not loader.has_more:
                    logger.info("No more stories to load")
                    break
                loader.load_more()

            if loader.error:
                logger.error(f"Failed to load stories: {loader.error}")
                break

            if page == 0 and loader.is_sample:
                self._write("Showing sample stories; Reddit could not be reached.\n")

            printed = self._print_new_stories(loader.stories, printed)

        if printed == 0:
            logger.warning("No stories found")
            return False
        return True

    def show_source_info(self, source_name: str) -> bool:
        """Print metadata about a subreddit."""
        info = self.fetcher.get_source_info(source_name)
        if info is None:
            return False
        self._write(format_source_info(info) + "\n")
        return True

    def _print_new_stories(self, stories: List[ContentItem], already_printed: int) -> int:
        for number, story in enumerate(stories[already_printed:], start=already_printed + 1):
            self._write(f"[{number}] {format_story_card(story)}\n\n")
        return len(stories)

    def _write(self, text: str) -> None:
        self.out.write(text)


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Paranormal Story Reader')
    parser.add_argument('--sort', choices=SORT_CHOICES, default=settings.DEFAULT_SORT,
                        help='Listing order')
    parser.add_argument('--time', dest='time_filter', choices=TIME_CHOICES,
                        default=settings.DEFAULT_TIME_FILTER,
                        help='Time window for top listings and searches')
    parser.add_argument('--limit', type=int, default=settings.DEFAULT_LIMIT, help='Stories per page')
    parser.add_argument('--query', type=str, default=None, help='Search the paranormal subreddits')
    parser.add_argument('--subreddit', type=str, default=None, metavar='NAME',
                        help='List one subreddit instead of the curated stories')
    parser.add_argument('--pages', type=int, default=1, help='Number of pages to load')
    parser.add_argument('--info', type=str, default=None, metavar='SUBREDDIT',
                        help='Show information about a subreddit and exit')
    parser.add_argument('--log-file', type=str, default=settings.LOG_FILE, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=settings.LOG_LEVEL, help='Logging level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point for the application."""
    # Parse command line arguments
    args = parse_arguments(argv)

    try:
        # Set up logging
        log_level = getattr(logging, args.log_level, logging.INFO)
        try:
            setup_file_logging(args.log_file, log_level)
        except OSError as e:
            raise ConfigurationError(f"Cannot open log file {args.log_file}: {e}") from e

        logger.info("Starting Story Reader application")
        logger.debug(f"Configuration: {settings.get_config_summary()}")

        reader = StoryReader()

        if args.info:
            success = reader.show_source_info(args.info)
        else:
            options = LoaderOptions(
                sort=args.sort,
                time_filter=args.time_filter,
                limit=args.limit,
                query=args.query,
                source_name=args.subreddit,
            )
            success = reader.run(options, pages=args.pages)

        exit_code = 0 if success else 1

    except ConfigurationError as e:
        logger.error(str(e))
        exit_code = 2
    except Exception as e:
        logger.error(f"Unhandled exception in Story Reader: {e}", exc_info=True)
        exit_code = 2

    logger.info(f"Story Reader finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
