"""
SQLAlchemy-backed sink for result records.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.repositories.profile_result_repository import ProfileResultRepository
from app.scraping.storage.base import ResultSink
from app.scraping.types import ResultRecord


class SQLAlchemyResultSink(ResultSink):
    """
    Persist each record through the repository, one commit per record.
    """

    def __init__(self, *, session: Session) -> None:
        self._session = session

    def append(self, record: ResultRecord) -> None:
        repository = ProfileResultRepository(self._session)
        try:
            repository.add(record)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
