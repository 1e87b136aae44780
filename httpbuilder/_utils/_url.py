from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlparse, urlsplit, urlunsplit


def split_query(url: str) -> Tuple[str, Dict[str, str]]:
    """Separate the query component from a URL.

    >>> split_query("/p?x=1&y=2")
    ('/p', {'x': '1', 'y': '2'})

    Repeated keys keep their last value. The fragment, if any, stays on the URL.
    """
    parts = urlsplit(url)
    if "?" not in url:
        return url, {}

    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    stripped = urlunsplit((parts.scheme, parts.netloc, parts.path, "", parts.fragment))

    return stripped, params


def build_query(params: Mapping[str, Any]) -> str:
    return urlencode(params, doseq=True)


def append_query(url: str, params: Mapping[str, Any]) -> str:
    if not params:
        return url

    parts = urlsplit(url)
    query = build_query(params)
    if parts.query:
        query = f"{parts.query}&{query}"

    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def hostname_of(url: str) -> Optional[str]:
    return urlparse(url).hostname


def is_relative_url(url: str) -> bool:
    # Empty URLs are considered relative
    if not url:
        return True

    parsed = urlparse(url)

    # Protocol-relative URLs (starting with //) are not relative
    if url.startswith("//"):
        return False

    # URLs with schemes are not relative (http:, https:, mailto:, etc.)
    if parsed.scheme:
        return False

    # URLs with network locations are not relative
    if parsed.netloc:
        return False

    return True


def resolve_url(base_url: str, url: str) -> str:
    """Prefix relative URLs with ``base_url``; absolute URLs pass through."""
    if not base_url or not is_relative_url(url):
        return url

    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"
