"""
db/models/profile_scrape_result.py

Append-only table of profile scrape result records.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ProfileScrapeResult(Base, TimestampMixin):
    __tablename__ = "profile_scrape_results"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="success, failed",
    )
    game: Mapped[str] = mapped_column(String(64), nullable=False)
    user: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    stats: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Extracted stats object; null when extraction produced nothing usable",
    )
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_profile_scrape_results_game", "game"),
        Index("ix_profile_scrape_results_status", "status"),
        Index("ix_profile_scrape_results_created_at", "created_at"),
    )
