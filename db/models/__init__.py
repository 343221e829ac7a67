"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.profile_scrape_result import ProfileScrapeResult

__all__ = [
    "ProfileScrapeResult",
]
