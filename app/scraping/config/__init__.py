"""
Config helpers for profile scraping.
"""

from app.scraping.config.loader import (
    GameConfigError,
    get_profile_scraping_settings,
    load_game_profiles,
)
from app.scraping.config.models import GameProfile, ProfileScrapingSettings

__all__ = [
    "GameConfigError",
    "GameProfile",
    "ProfileScrapingSettings",
    "get_profile_scraping_settings",
    "load_game_profiles",
]
