"""
JSON Lines file sink for result records.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

from app.scraping.storage.base import ResultSink
from app.scraping.types import ResultRecord


class JsonLinesResultSink(ResultSink):
    """
    Append each record as one JSON object per line.
    """

    def __init__(self, *, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: ResultRecord) -> None:
        line = json.dumps(record.to_payload(), ensure_ascii=False)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
