"""
app/schemas package marker.
"""

from app.schemas.profile_scraping import (
    PlayerSpecRequest,
    ProfileScrapeBatchResponse,
    ProfileScrapeRequest,
)

__all__ = [
    "PlayerSpecRequest",
    "ProfileScrapeBatchResponse",
    "ProfileScrapeRequest",
]
