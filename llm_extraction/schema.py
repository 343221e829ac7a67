"""Canonical structured output schema for extracted player statistics."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

STATS_FIELDS = (
    "username",
    "rank",
    "kills",
    "matchesPlayed",
    "winRate",
)


class PlayerStats(BaseModel):
    """Only allowed output contract for the stats extraction layer.

    Every field is optional: a stat the model could not find in the page
    text must come back as ``None``.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    username: Optional[str] = None
    rank: Optional[str] = None
    kills: Optional[str] = None
    matchesPlayed: Optional[str] = None
    winRate: Optional[str] = None
