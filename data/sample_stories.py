"""
Sample Stories

Hand-written stories returned when every upstream source is unreachable.
They are stored in the upstream listing shape so they pass through the same
normalizer as live data.
"""

import time
from typing import Any, Dict, Optional

from config import settings

SAMPLE_POSTS = [
    {
        "id": "sample1",
        "title": "The House That Watches You Back",
        "selftext": (
            "I moved into my grandmother's old house last month. Everything seemed normal "
            "until I noticed the windows. Every morning, I'd wake up to find handprints on "
            "the glass from the inside - but I live alone..."
        ),
        "author": "sample_user_1",
        "age_seconds": 86400,
        "score": 847,
        "num_comments": 123,
        "subreddit": "nosleep",
        "permalink": "/r/nosleep/comments/sample1/the_house_that_watches_you_back/",
    },
    {
        "id": "sample2",
        "title": "My Phone Keeps Getting Calls from My Own Number",
        "selftext": (
            "It started three weeks ago. Every night at 3:17 AM, my phone rings. The caller "
            "ID shows my own number. When I answer, I hear my own voice saying things I've "
            "never said..."
        ),
        "author": "sample_user_2",
        "age_seconds": 172800,
        "score": 634,
        "num_comments": 89,
        "subreddit": "paranormal",
        "permalink": "/r/paranormal/comments/sample2/phone_calls_from_my_own_number/",
    },
    {
        "id": "sample3",
        "title": "The Elevator That Goes to Floors That Don't Exist",
        "selftext": (
            "My office building has 20 floors. But sometimes, late at night, the elevator "
            "buttons show floors 21, 22, and 23. I made the mistake of pressing 21 yesterday..."
        ),
        "author": "sample_user_3",
        "age_seconds": 259200,
        "score": 1205,
        "num_comments": 167,
        "subreddit": "LetsNotMeet",
        "permalink": "/r/LetsNotMeet/comments/sample3/elevator_mystery_floors/",
    },
]


def sample_listing(now: Optional[float] = None) -> Dict[str, Any]:
    """
    Build a listing payload holding the sample posts.

    Args:
        now: Reference epoch seconds for post ages (defaults to the current time)

    Returns:
        dict: A payload in the upstream listing shape with no cursors
    """
    now = int(now if now is not None else time.time())
    children = []
    for post in SAMPLE_POSTS:
        data = {key: value for key, value in post.items() if key != "age_seconds"}
        data["created_utc"] = now - post["age_seconds"]
        data["url"] = f"{settings.REDDIT_BASE_URL}{post['permalink']}"
        data["stickied"] = False
        data["over_18"] = False
        children.append({"kind": "t3", "data": data})

    return {"kind": "Listing", "data": {"children": children, "after": None, "before": None}}
