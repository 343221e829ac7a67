"""
Profile scraping engine.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence

from app.scraping.browser import BrowserSessionFactory
from app.scraping.config.models import GameProfile, ProfileScrapingSettings
from app.scraping.logging_utils import log_event, request_fields
from app.scraping.pipeline import ProfilePipeline
from app.scraping.reporter import OutcomeReporter, failure_record
from app.scraping.storage import ResultSink
from app.scraping.types import BatchResult, PlayerSpec, ProfileRequest, ResultRecord
from llm_extraction.extractor import StructuredStatsExtractor

logger = logging.getLogger(__name__)


class ProfileScrapingEngine:
    """
    Fans player specs out into requests and runs them on a bounded worker pool.

    Every request that survives validation produces exactly one record; no
    single request's failure stops the batch.
    """

    def __init__(
        self,
        *,
        settings: ProfileScrapingSettings,
        profiles: Mapping[str, GameProfile],
        sink: ResultSink,
        stats_extractor: StructuredStatsExtractor,
        session_factory: BrowserSessionFactory | None = None,
        pipeline: ProfilePipeline | None = None,
    ) -> None:
        self._settings = settings
        self._profiles = profiles
        self._reporter = OutcomeReporter(sink=sink)
        self._session_factory = session_factory
        self._pipeline = pipeline or ProfilePipeline(
            profiles=profiles,
            settings=settings,
            stats_extractor=stats_extractor,
        )

    def build_requests(self, players: Sequence[PlayerSpec]) -> tuple[list[ProfileRequest], list[str]]:
        """
        One request per (player, configured game); unknown games are skipped.
        """

        requests: list[ProfileRequest] = []
        skipped: list[str] = []
        for player in players:
            for game in player.games:
                profile = self._profiles.get(game)
                if profile is None:
                    skipped.append(game)
                    log_event(
                        logger,
                        logging.WARNING,
                        "unknown_game_skipped",
                        game=game,
                        user=player.username,
                    )
                    continue
                requests.append(
                    ProfileRequest(
                        game=profile.game_key,
                        username=player.username,
                        platform=player.platform,
                        marvel_id=player.marvel_id,
                        use_alternate_id=profile.prefers_alternate_id,
                    )
                )
        return requests, skipped

    async def run(self, players: Sequence[PlayerSpec]) -> BatchResult:
        requests, skipped = self.build_requests(players)
        log_event(
            logger,
            logging.INFO,
            "profile_batch_started",
            requests=len(requests),
            skipped=len(skipped),
            concurrency=self._settings.concurrency,
        )
        if not requests:
            return BatchResult(skipped_games=skipped)

        semaphore = asyncio.Semaphore(self._settings.concurrency)
        factory = self._session_factory or BrowserSessionFactory(settings=self._settings)
        async with factory:
            records = await asyncio.gather(
                *(self._run_one(factory, request, semaphore) for request in requests)
            )

        result = BatchResult(records=list(records), skipped_games=skipped)
        log_event(
            logger,
            logging.INFO,
            "profile_batch_completed",
            records=len(result.records),
            succeeded=sum(1 for record in result.records if record.succeeded),
            skipped=len(skipped),
        )
        return result

    async def _run_one(
        self,
        factory: BrowserSessionFactory,
        request: ProfileRequest,
        semaphore: asyncio.Semaphore,
    ) -> ResultRecord:
        timeout = self._settings.request_timeout_seconds
        async with semaphore:
            try:
                record = await asyncio.wait_for(self._process(factory, request), timeout=timeout)
            except asyncio.TimeoutError:
                log_event(
                    logger,
                    logging.ERROR,
                    "request_timed_out",
                    timeout_seconds=timeout,
                    **request_fields(request),
                )
                record = failure_record(request, f"request timed out after {timeout:g}s")
            except Exception as exc:
                log_event(
                    logger,
                    logging.ERROR,
                    "request_failed",
                    error=str(exc),
                    **request_fields(request),
                )
                record = failure_record(request, f"request failed: {exc}")
        return self._reporter.emit(request, record)

    async def _process(self, factory: BrowserSessionFactory, request: ProfileRequest) -> ResultRecord:
        async with factory.open_session() as session:
            return await self._pipeline.process(session, request)
