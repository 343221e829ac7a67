"""
app/schemas/profile_scraping.py

Request and response schemas for profile scraping operations.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.scraping.types import PlayerSpec


class PlayerSpecRequest(BaseModel):
    """
    One player to look up across one or more games.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    username: str = Field(..., min_length=1)
    platform: str = Field(..., min_length=1)
    games: list[str] = Field(..., min_length=1)
    marvel_id: str | None = Field(default=None, alias="marvelId")

    def to_player_spec(self) -> PlayerSpec:
        return PlayerSpec.from_payload(
            {
                "username": self.username,
                "platform": self.platform,
                "games": self.games,
                "marvelId": self.marvel_id,
            }
        )


class ProfileScrapeRequest(BaseModel):
    """
    API request body for one scrape batch.
    """

    players: list[PlayerSpecRequest] = Field(default_factory=list)


class ProfileScrapeBatchResponse(BaseModel):
    """
    API response: one record per processed (player, game) pair.
    """

    records: list[dict[str, Any]] = Field(default_factory=list)
    skipped_games: list[str] = Field(default_factory=list)
