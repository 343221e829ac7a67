"""
Shared scraping runtime data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.scraping.page_state import PageState
from llm_extraction.schema import PlayerStats

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class PlayerSpec:
    """
    One input player; fans out into one ProfileRequest per game.
    """

    username: str
    platform: str
    games: tuple[str, ...] = ()
    marvel_id: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PlayerSpec":
        raw_games = payload.get("games") or []
        if isinstance(raw_games, str):
            raw_games = [raw_games]
        games = tuple(
            str(game).strip().lower()
            for game in raw_games
            if str(game).strip()
        )
        return cls(
            username=str(payload.get("username") or "").strip(),
            platform=str(payload.get("platform") or "").strip(),
            games=games,
            marvel_id=str(payload.get("marvelId") or "").strip() or None,
        )


@dataclass(frozen=True)
class ProfileRequest:
    """
    One (player, game) unit of work. Immutable once enqueued.
    """

    game: str
    username: str
    platform: str
    marvel_id: str | None = None
    use_alternate_id: bool = False

    @property
    def target_user(self) -> str:
        """
        Identity typed into the site search and reported back in records.
        """

        if self.use_alternate_id and self.marvel_id:
            return self.marvel_id
        return self.username


@dataclass(frozen=True)
class NavigationOutcome:
    """
    Where the browser ended up after direct navigation and fallback search.
    """

    final_url: str
    reached_profile: bool
    used_fallback_search: bool
    final_state: PageState
    error: str | None = None


@dataclass(frozen=True)
class ExtractionResult:
    """
    Captured page text and the stats parsed from it, if any.
    """

    raw_text: str
    structured_stats: PlayerStats | None = None


@dataclass(frozen=True)
class ResultRecord:
    """
    The single externally observable output for one ProfileRequest.
    """

    status: str
    game: str
    user: str
    url: str | None = None
    stats: PlayerStats | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_payload(self) -> dict[str, Any]:
        """
        Serialize to the fixed output shape for success or failure records.
        """

        if self.succeeded:
            return {
                "status": STATUS_SUCCESS,
                "game": self.game,
                "user": self.user,
                "url": self.url,
                "stats": self.stats.model_dump() if self.stats is not None else None,
            }

        payload: dict[str, Any] = {
            "status": STATUS_FAILED,
            "game": self.game,
            "user": self.user,
        }
        if self.url:
            payload["url"] = self.url
        payload["error"] = self.error or "unknown error"
        return payload


@dataclass
class BatchResult:
    """
    Records emitted for one batch, plus the inputs skipped before any work.
    """

    records: list[ResultRecord] = field(default_factory=list)
    skipped_games: list[str] = field(default_factory=list)
