"""
Structured logging helpers for profile scraping workflows.
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.scraping.types import ProfileRequest


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once for a CLI or API process.
    """

    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def request_fields(request: "ProfileRequest") -> dict[str, Any]:
    """
    Common identifying fields for events about one profile request.
    """

    return {
        "game": request.game,
        "user": request.target_user,
        "platform": request.platform,
    }


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
