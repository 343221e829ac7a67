"""
URL-only page state heuristic.
"""

from __future__ import annotations

from enum import Enum

SEARCH_RESULTS_MARKER = "search?"


class PageState(str, Enum):
    HOME = "home"
    SEARCH_RESULTS = "search_results"
    PROFILE_OR_UNKNOWN = "profile_or_unknown"

    @property
    def is_unresolved(self) -> bool:
        return self in (PageState.HOME, PageState.SEARCH_RESULTS)


def _normalize(url: str) -> str:
    return (url or "").strip().rstrip("/")


def classify_page(current_url: str, base_url: str) -> PageState:
    """
    Classify the browser's current URL relative to the site's base URL.

    Home detection is an exact match after trailing-slash normalization.
    Anything that is neither home nor a search results URL is reported as
    PROFILE_OR_UNKNOWN; a URL alone cannot tell a profile from any other page.
    """

    if _normalize(current_url) == _normalize(base_url):
        return PageState.HOME
    if SEARCH_RESULTS_MARKER in (current_url or ""):
        return PageState.SEARCH_RESULTS
    return PageState.PROFILE_OR_UNKNOWN


def is_http_url(url: str | None) -> bool:
    return (url or "").lower().startswith(("http://", "https://"))
