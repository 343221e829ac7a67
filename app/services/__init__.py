"""
app/services package marker.
"""

from app.services.profile_scraping_service import (
    ProfileScrapingService,
    build_llm_adapter,
    build_stats_extractor,
    get_profile_scraping_service,
)

__all__ = [
    "ProfileScrapingService",
    "build_llm_adapter",
    "build_stats_extractor",
    "get_profile_scraping_service",
]
