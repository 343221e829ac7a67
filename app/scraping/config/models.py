"""
Scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_PROFILE_READY_SELECTORS: tuple[str, ...] = (
    ".user-info",
    ".profile-header",
    ".stat",
    ".main-content",
)


@dataclass(frozen=True)
class GameProfile:
    """
    Static site description for one game, loaded once per process.
    """

    game_key: str
    base_url: str
    platform_slug_map: dict[str, str] = field(default_factory=dict)
    supports_direct_url: bool = False
    prefers_alternate_id: bool = False
    profile_ready_selectors: tuple[str, ...] = DEFAULT_PROFILE_READY_SELECTORS


@dataclass(frozen=True)
class ProfileScrapingSettings:
    """
    Runtime settings for profile scraping.
    """

    games_config_path: str
    concurrency: int
    headless: bool
    user_agent: str
    viewport_width: int
    viewport_height: int
    proxy_server: str | None
    blocked_extensions: tuple[str, ...]
    navigation_timeout_ms: int
    consent_timeout_ms: int
    typing_delay_ms: int
    search_input_probe_timeout_ms: int
    search_settle_ms: int
    search_submit_wait_ms: int
    network_idle_timeout_ms: int
    profile_ready_timeout_ms: int
    content_timeout_ms: int
    request_timeout_seconds: float
    sink: str
    output_path: str
