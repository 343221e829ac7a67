"""
app/repositories/profile_result_repository.py

Persistence layer for profile scrape result records.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.scraping.types import ResultRecord
from db.models.profile_scrape_result import ProfileScrapeResult


class ProfileResultRepository:
    """
    Append-only repository for ProfileScrapeResult rows.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, record: ResultRecord) -> ProfileScrapeResult:
        """
        Stage one result row on the session; the caller commits.
        """

        payload = record.to_payload()
        row = ProfileScrapeResult(
            status=payload["status"],
            game=payload["game"],
            user=payload["user"],
            url=payload.get("url"),
            stats=payload.get("stats"),
            error=payload.get("error"),
        )
        self._session.add(row)
        return row
