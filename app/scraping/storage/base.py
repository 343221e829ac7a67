"""
Output sink interfaces for profile scrape result records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.scraping.types import ResultRecord


class ResultSink(ABC):
    """
    Append-only destination for result records.
    """

    @abstractmethod
    def append(self, record: ResultRecord) -> None:
        """
        Durably accept one record. No update or delete semantics.
        """
