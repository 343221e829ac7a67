"""
app/api/routers/profile_scraping.py

Profile stats scraping endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config import ConfigurationError
from app.schemas.profile_scraping import ProfileScrapeBatchResponse, ProfileScrapeRequest
from app.services.profile_scraping_service import (
    SINK_DATABASE,
    ProfileScrapingService,
    get_profile_scraping_service,
)
from db.session import get_db

router = APIRouter(tags=["profile-scraping"])


@router.post("/profile-stats/scrape", response_model=ProfileScrapeBatchResponse)
async def scrape_profile_stats(
    payload: ProfileScrapeRequest,
    db: Session = Depends(get_db),
    scraping_service: ProfileScrapingService = Depends(get_profile_scraping_service),
) -> ProfileScrapeBatchResponse:
    """
    Scrape every (player, game) pair and persist one record per pair.
    """

    players = [player.to_player_spec() for player in payload.players]
    try:
        sink = scraping_service.build_sink(sink_name=SINK_DATABASE, db=db)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    result = await scraping_service.scrape(players=players, sink=sink)
    return ProfileScrapeBatchResponse(
        records=[record.to_payload() for record in result.records],
        skipped_games=result.skipped_games,
    )
