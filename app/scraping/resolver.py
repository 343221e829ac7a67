"""
Direct profile URL construction from known site patterns.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote

from app.scraping.config.models import GameProfile

# Characters encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def platform_slug(profile: GameProfile, platform: str) -> str:
    """
    Map a platform alias to the site's URL slug; unknown aliases pass through.
    """

    return profile.platform_slug_map.get(platform.strip().lower(), platform)


def resolve_profile_url(
    game: str,
    username: str,
    platform: str,
    *,
    profiles: Mapping[str, GameProfile],
) -> str | None:
    """
    Best-guess canonical profile URL, or None when no direct pattern applies.

    The guess may still 404 (e.g. an unmapped platform); callers confirm it
    by classifying the page they land on.
    """

    profile = profiles.get((game or "").strip().lower())
    if profile is None or not username or not platform:
        return None
    if not profile.supports_direct_url:
        return None

    slug = platform_slug(profile, platform)
    encoded_user = quote(username, safe=_URI_COMPONENT_SAFE)
    return f"{profile.base_url}/profile/{slug}/{encoded_user}/overview"
