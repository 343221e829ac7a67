"""
Environment + JSON config loader for profile scraping.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

from db.config import load_env_files

from app.scraping.config.models import (
    DEFAULT_PROFILE_READY_SELECTORS,
    GameProfile,
    ProfileScrapingSettings,
)

MAX_CONCURRENCY = 5

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)
_DEFAULT_BLOCKED_EXTENSIONS = "png,jpg,jpeg,mp4,gif,woff,woff2"


class GameConfigError(RuntimeError):
    """
    Raised when the game profile configuration is missing or malformed.
    """


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


def _parse_extensions(raw: str) -> tuple[str, ...]:
    return tuple(
        item.strip().lower().lstrip(".")
        for item in raw.split(",")
        if item.strip()
    )


@lru_cache(maxsize=1)
def get_profile_scraping_settings() -> ProfileScrapingSettings:
    """
    Return cached scraper settings from environment variables.
    """

    load_env_files()
    games_config_path = _get_str_env(
        "PROFILE_SCRAPE_GAMES_CONFIG_PATH",
        "app/scraping/config/games.json",
    )
    proxy_server = os.getenv("PROFILE_SCRAPE_PROXY_SERVER", "").strip() or None
    return ProfileScrapingSettings(
        games_config_path=str(_resolve_config_path(games_config_path)),
        concurrency=min(
            MAX_CONCURRENCY,
            max(1, _get_int_env("PROFILE_SCRAPE_CONCURRENCY", 1)),
        ),
        headless=_get_bool_env("PROFILE_SCRAPE_HEADLESS", True),
        user_agent=_get_str_env("PROFILE_SCRAPE_USER_AGENT", _DEFAULT_USER_AGENT),
        viewport_width=max(320, _get_int_env("PROFILE_SCRAPE_VIEWPORT_WIDTH", 1920)),
        viewport_height=max(240, _get_int_env("PROFILE_SCRAPE_VIEWPORT_HEIGHT", 1080)),
        proxy_server=proxy_server,
        blocked_extensions=_parse_extensions(
            _get_str_env("PROFILE_SCRAPE_BLOCKED_EXTENSIONS", _DEFAULT_BLOCKED_EXTENSIONS)
        ),
        navigation_timeout_ms=max(
            1000,
            _get_int_env("PROFILE_SCRAPE_NAVIGATION_TIMEOUT_MS", 90_000),
        ),
        consent_timeout_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_CONSENT_TIMEOUT_MS", 5_000),
        ),
        typing_delay_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_TYPING_DELAY_MS", 150),
        ),
        search_input_probe_timeout_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_SEARCH_INPUT_PROBE_TIMEOUT_MS", 3_000),
        ),
        search_settle_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_SEARCH_SETTLE_MS", 2_000),
        ),
        search_submit_wait_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_SEARCH_SUBMIT_WAIT_MS", 1_000),
        ),
        network_idle_timeout_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_NETWORK_IDLE_TIMEOUT_MS", 15_000),
        ),
        profile_ready_timeout_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_PROFILE_READY_TIMEOUT_MS", 10_000),
        ),
        content_timeout_ms=max(
            0,
            _get_int_env("PROFILE_SCRAPE_CONTENT_TIMEOUT_MS", 2_000),
        ),
        request_timeout_seconds=max(
            1.0,
            _get_float_env("PROFILE_SCRAPE_REQUEST_TIMEOUT_SECONDS", 180.0),
        ),
        sink=_get_str_env("PROFILE_SCRAPE_SINK", "jsonl").lower(),
        output_path=str(
            _resolve_config_path(
                _get_str_env("PROFILE_SCRAPE_OUTPUT_PATH", "output/profile_results.jsonl")
            )
        ),
    )


def load_game_profiles(*, config_path: str) -> dict[str, GameProfile]:
    """
    Load game profiles from a JSON file, keyed by game key.

    Raises GameConfigError for a missing file or any malformed entry;
    this is a startup failure, never a per-request one.
    """

    path = _resolve_config_path(config_path)
    if not path.exists():
        raise GameConfigError(f"Game config file not found: {path}")

    try:
        raw_data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise GameConfigError(f"Game config file is not valid JSON: {path}: {exc}") from exc

    games = raw_data.get("games") if isinstance(raw_data, dict) else None
    if not isinstance(games, list):
        raise GameConfigError("Invalid game config: 'games' must be a list.")

    parsed: dict[str, GameProfile] = {}
    for index, entry in enumerate(games):
        if not isinstance(entry, dict):
            raise GameConfigError(f"Invalid game config entry #{index}: must be an object.")

        game_key = str(entry.get("game_key", "")).strip().lower()
        base_url = str(entry.get("base_url", "")).strip()
        if not game_key or not base_url:
            raise GameConfigError(
                f"Invalid game config entry #{index}: 'game_key' and 'base_url' are required."
            )
        if not base_url.startswith(("http://", "https://")):
            raise GameConfigError(
                f"Invalid base_url for game='{game_key}': {base_url!r} is not an http(s) URL."
            )
        if game_key in parsed:
            raise GameConfigError(f"Duplicate game config entry for game='{game_key}'.")

        selectors = _normalize_selectors(entry.get("profile_ready_selectors"))
        parsed[game_key] = GameProfile(
            game_key=game_key,
            base_url=base_url.rstrip("/"),
            platform_slug_map=_normalize_slug_map(entry.get("platform_slug_map", {})),
            supports_direct_url=_optional_bool(entry.get("supports_direct_url"), False),
            prefers_alternate_id=_optional_bool(entry.get("prefers_alternate_id"), False),
            profile_ready_selectors=selectors or DEFAULT_PROFILE_READY_SELECTORS,
        )

    if not parsed:
        raise GameConfigError("Invalid game config: no games defined.")
    return parsed


def _normalize_slug_map(slug_map: object) -> dict[str, str]:
    if not isinstance(slug_map, dict):
        return {}

    normalized: dict[str, str] = {}
    for key, value in slug_map.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        if key.strip() and value.strip():
            normalized[key.strip().lower()] = value.strip()
    return normalized


def _normalize_selectors(selectors: object) -> tuple[str, ...]:
    if isinstance(selectors, str):
        return (selectors.strip(),) if selectors.strip() else ()
    if not isinstance(selectors, list):
        return ()
    return tuple(
        item.strip()
        for item in selectors
        if isinstance(item, str) and item.strip()
    )


def _optional_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default
