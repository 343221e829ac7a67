"""
app/api/routers package marker.
"""

from app.api.routers.profile_scraping import router as profile_scraping_router

__all__ = [
    "profile_scraping_router",
]
