"""
Normalizer Module

Converts raw upstream listing payloads into FetchResult objects and subreddit
metadata into SourceInfo. Ordering of entries is preserved.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import settings
from data.models import ContentItem, FetchResult, SourceInfo
from utils.exceptions import MalformedResponse
from utils.helpers import from_epoch_seconds, safe_get, to_int


def estimate_reading_time(text: Optional[str], words_per_minute: Optional[int] = None) -> int:
    """
    Estimate reading time in whole minutes.

    Args:
        text: Story body text.
        words_per_minute: Reading speed (defaults to settings.WORDS_PER_MINUTE).

    Returns:
        int: ceil(word count / words per minute), 0 for empty text.
    """
    if not text:
        return 0
    words_per_minute = words_per_minute or settings.WORDS_PER_MINUTE
    word_count = len(text.split())
    return math.ceil(word_count / words_per_minute)


def clean_body_text(text: Optional[str]) -> str:
    """Map missing bodies and the upstream removal sentinel to an empty string."""
    if not text or text == settings.REMOVED_SENTINEL:
        return ""
    return text


# Each filter sees the entry's ``data`` dict. NSFW entries are always kept:
# horror stories are frequently flagged over_18.
def _has_title(post: Dict[str, Any]) -> bool:
    return bool(post.get("title"))


def _not_stickied(post: Dict[str, Any]) -> bool:
    return not post.get("stickied")


def _has_content(post: Dict[str, Any]) -> bool:
    return bool(clean_body_text(post.get("selftext")) or post.get("url"))


ENTRY_FILTERS: List[Tuple[str, Callable[[Dict[str, Any]], bool]]] = [
    ("title", _has_title),
    ("stickied", _not_stickied),
    ("content", _has_content),
]


def to_content_item(post: Dict[str, Any]) -> ContentItem:
    """Build a ContentItem from one entry's ``data`` dict."""
    body_text = clean_body_text(post.get("selftext"))
    return ContentItem(
        id=str(post.get("id", "")),
        title=str(post["title"]),
        body_text=body_text,
        author=str(post.get("author") or "[deleted]"),
        created_at=from_epoch_seconds(post.get("created_utc")),
        score=to_int(post.get("score")),
        comment_count=max(0, to_int(post.get("num_comments"))),
        source_name=str(post.get("subreddit") or ""),
        permalink=str(post.get("permalink") or ""),
        estimated_reading_minutes=estimate_reading_time(body_text),
        url=str(post.get("url") or ""),
        is_nsfw=bool(post.get("over_18")),
    )


def normalize(raw: Any) -> FetchResult:
    """
    Convert a raw listing payload into a FetchResult.

    Args:
        raw: Decoded JSON of the form ``{data: {children: [{data: {...}}], after, before}}``.

    Returns:
        FetchResult: Filtered, normalized items in upstream order with cursors.

    Raises:
        MalformedResponse: If no children list is reachable at ``data.children``.
    """
    listing = safe_get(raw, "data")
    children = safe_get(listing, "children")
    if not isinstance(listing, dict) or not isinstance(children, list):
        raise MalformedResponse("Invalid Reddit API response format")

    items = []
    for child in children:
        post = safe_get(child, "data")
        if not isinstance(post, dict):
            continue
        if all(keep(post) for _, keep in ENTRY_FILTERS):
            items.append(to_content_item(post))

    return FetchResult(
        items=items,
        next_cursor=listing.get("after") or None,
        previous_cursor=listing.get("before") or None,
        count=len(items),
    )


def normalize_source_info(raw: Any) -> SourceInfo:
    """
    Convert a subreddit ``about`` payload into SourceInfo.

    Raises:
        MalformedResponse: If the payload has no ``data`` object.
    """
    about = safe_get(raw, "data")
    if not isinstance(about, dict) or not about.get("display_name"):
        raise MalformedResponse("Invalid subreddit info response format")

    created = about.get("created_utc")
    return SourceInfo(
        name=str(about["display_name"]),
        title=str(about.get("title") or ""),
        description=str(about.get("public_description") or ""),
        subscribers=to_int(about.get("subscribers")),
        active_users=to_int(about.get("active_user_count", about.get("accounts_active"))),
        is_nsfw=bool(about.get("over18")),
        created_at=from_epoch_seconds(created) if created is not None else None,
    )
