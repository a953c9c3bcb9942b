"""
Request Builder Module

Translates a RequestSpec into upstream endpoint paths, query parameters and
fully-qualified URLs, and wraps targets behind relay prefixes. Pure functions,
no network I/O.
"""

from typing import List, Optional, Sequence
from urllib.parse import quote, urlencode

from data.models import RequestSpec, SortMode, SourceScope

# Same character set as JavaScript's encodeURIComponent leaves unescaped
SAFE_COMPONENT_CHARS = "-_.!~*'()"


def build_endpoint(scope: SourceScope, source_name: Optional[str], sort_mode: SortMode) -> str:
    """
    Build the API path for a listing request.

    Args:
        scope: Single subreddit listing or global search.
        source_name: Subreddit name (required for single-source scope).
        sort_mode: Listing order; part of the path for single-source listings.

    Returns:
        str: Path such as ``/r/nosleep/top`` or ``/search``.
    """
    if SourceScope(scope) == SourceScope.SEARCH:
        return "/search"
    return f"/r/{source_name}/{SortMode(sort_mode).value}"


def build_about_endpoint(source_name: str) -> str:
    """Build the path for a subreddit's metadata."""
    return f"/r/{source_name}/about"


def build_search_query(query: Optional[str], sources: Sequence[str]) -> str:
    """
    Confine a free-text query to the given subreddits.

    The upstream search treats juxtaposed terms as AND, so the result is the
    caller's query AND (subreddit:a OR subreddit:b ...).
    """
    source_clause = " OR ".join(f"subreddit:{name}" for name in sources)
    query = (query or "").strip()
    if not source_clause:
        return query
    if not query:
        return f"({source_clause})"
    return f"{query} ({source_clause})"


def build_params(spec: RequestSpec, allowed_sources: Sequence[str] = ()) -> List[tuple]:
    """
    Build the ordered query parameters for a request.

    Args:
        spec: The request description.
        allowed_sources: Subreddit allow-list applied to searches.

    Returns:
        list: ``(name, value)`` pairs ready for urlencode.
    """
    params = []

    if spec.source_scope == SourceScope.SEARCH:
        params.append(("q", build_search_query(spec.query, allowed_sources)))
        params.append(("sort", spec.sort_mode.value))
        params.append(("type", "link"))

    params.append(("limit", str(spec.limit)))
    params.append(("raw_json", "1"))

    if spec.cursor:
        params.append(("after", spec.cursor))

    # The time window only affects top listings and searches upstream
    if spec.time_window and (spec.source_scope == SourceScope.SEARCH or spec.sort_mode == SortMode.TOP):
        params.append(("t", spec.time_window.value))

    return params


def build_target(base_url: str, endpoint: str, params: Optional[Sequence[tuple]] = None) -> str:
    """
    Join the base URL, the JSON form of the endpoint and the query string.

    Returns:
        str: e.g. ``https://www.reddit.com/r/nosleep/top.json?limit=25&raw_json=1``
    """
    url = f"{base_url.rstrip('/')}{endpoint}.json"
    if params:
        url = f"{url}?{urlencode(list(params))}"
    return url


def build_request_url(base_url: str, spec: RequestSpec, allowed_sources: Sequence[str] = ()) -> str:
    """Build the full upstream URL for a RequestSpec."""
    endpoint = build_endpoint(spec.source_scope, spec.source_name, spec.sort_mode)
    return build_target(base_url, endpoint, build_params(spec, allowed_sources))


def wrap_with_relay(relay_prefix: str, target_url: str) -> str:
    """Place a percent-encoded target URL behind a relay prefix."""
    return f"{relay_prefix}{quote(target_url, safe=SAFE_COMPONENT_CHARS)}"

