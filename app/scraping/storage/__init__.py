"""
Storage layer exports.
"""

from app.scraping.storage.base import ResultSink
from app.scraping.storage.jsonl_storage import JsonLinesResultSink
from app.scraping.storage.sqlalchemy_storage import SQLAlchemyResultSink

__all__ = ["JsonLinesResultSink", "ResultSink", "SQLAlchemyResultSink"]
