"""
Builds the one result record per request and hands it to the output sink.
"""

from __future__ import annotations

import logging

from app.scraping.logging_utils import log_event, request_fields
from app.scraping.page_state import is_http_url
from app.scraping.storage.base import ResultSink
from app.scraping.types import (
    STATUS_FAILED,
    STATUS_SUCCESS,
    ExtractionResult,
    NavigationOutcome,
    ProfileRequest,
    ResultRecord,
)

logger = logging.getLogger(__name__)

STUCK_ERROR_MESSAGE = "stuck on home/search results, profile not found"


def build_record(
    request: ProfileRequest,
    outcome: NavigationOutcome,
    extraction: ExtractionResult | None = None,
) -> ResultRecord:
    """
    Status follows navigation alone: a reached profile is a success even
    when stats extraction produced nothing.
    """

    if not outcome.reached_profile:
        error = outcome.error
        if outcome.final_state.is_unresolved or not error:
            error = STUCK_ERROR_MESSAGE
        return ResultRecord(
            status=STATUS_FAILED,
            game=request.game,
            user=request.target_user,
            url=outcome.final_url if is_http_url(outcome.final_url) else None,
            error=error,
        )

    return ResultRecord(
        status=STATUS_SUCCESS,
        game=request.game,
        user=request.target_user,
        url=outcome.final_url,
        stats=extraction.structured_stats if extraction is not None else None,
    )


def failure_record(request: ProfileRequest, error: str, *, url: str | None = None) -> ResultRecord:
    """
    Record for a request that could not run its pipeline to completion.
    """

    return ResultRecord(
        status=STATUS_FAILED,
        game=request.game,
        user=request.target_user,
        url=url if is_http_url(url) else None,
        error=error,
    )


class OutcomeReporter:
    """
    Forwards records to the sink; a sink failure is logged, not raised.
    """

    def __init__(self, *, sink: ResultSink) -> None:
        self._sink = sink

    def emit(self, request: ProfileRequest, record: ResultRecord) -> ResultRecord:
        level = logging.INFO if record.succeeded else logging.ERROR
        log_event(
            logger,
            level,
            "profile_result",
            status=record.status,
            url=record.url,
            has_stats=record.stats is not None,
            error=record.error,
            **request_fields(request),
        )
        try:
            self._sink.append(record)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "result_sink_failed",
                error=str(exc),
                **request_fields(request),
            )
        return record
