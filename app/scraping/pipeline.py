"""
Per-request navigation and extraction pipeline.

Steps run strictly in order against one ProfileSession: direct navigation,
consent dismissal, first classification, optional fallback search, settle
waits, final classification, then text capture and stats extraction for
pages that were reached.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from playwright.async_api import Page

from app.scraping.browser import ProfileSession
from app.scraping.config.loader import GameConfigError
from app.scraping.config.models import GameProfile, ProfileScrapingSettings
from app.scraping.content import extract_page_text
from app.scraping.logging_utils import log_event, request_fields
from app.scraping.overlays import dismiss_consent
from app.scraping.page_state import PageState, classify_page, is_http_url
from app.scraping.reporter import STUCK_ERROR_MESSAGE, build_record
from app.scraping.resolver import resolve_profile_url
from app.scraping.search_navigator import SearchAttempt, SearchNavigator
from app.scraping.types import ExtractionResult, NavigationOutcome, ProfileRequest, ResultRecord
from llm_extraction.extractor import StructuredStatsExtractor

logger = logging.getLogger(__name__)


class ProfilePipeline:
    """
    Runs one ProfileRequest to a ResultRecord. Never shares a page between
    requests; the caller supplies a fresh session each time.
    """

    def __init__(
        self,
        *,
        profiles: Mapping[str, GameProfile],
        settings: ProfileScrapingSettings,
        stats_extractor: StructuredStatsExtractor,
        navigator: SearchNavigator | None = None,
    ) -> None:
        self._profiles = profiles
        self._settings = settings
        self._stats_extractor = stats_extractor
        self._navigator = navigator or SearchNavigator(
            typing_delay_ms=settings.typing_delay_ms,
            settle_ms=settings.search_settle_ms,
            submit_wait_ms=settings.search_submit_wait_ms,
            probe_timeout_ms=settings.search_input_probe_timeout_ms,
        )

    async def process(self, session: ProfileSession, request: ProfileRequest) -> ResultRecord:
        outcome = await self.navigate(session, request)
        if not outcome.reached_profile:
            return build_record(request, outcome)

        extraction = await self.extract(session, request, outcome)
        return build_record(request, outcome, extraction)

    async def navigate(self, session: ProfileSession, request: ProfileRequest) -> NavigationOutcome:
        page = session.page
        profile = self._profile_for(request)
        fields = request_fields(request)

        direct_url = resolve_profile_url(
            request.game,
            request.username,
            request.platform,
            profiles=self._profiles,
        )
        target_url = direct_url or profile.base_url
        log_event(
            logger,
            logging.INFO,
            "navigation_started",
            url=target_url,
            direct=direct_url is not None,
            **fields,
        )

        navigation_error = await self._goto(page, target_url, fields)
        await dismiss_consent(page, timeout_ms=self._settings.consent_timeout_ms)

        initial_state = classify_page(page.url, profile.base_url)
        used_fallback = direct_url is None or initial_state is PageState.HOME
        search: SearchAttempt | None = None
        if used_fallback:
            log_event(
                logger,
                logging.INFO,
                "fallback_search_started",
                url=page.url,
                initial_state=initial_state.value,
                **fields,
            )
            search = await self._navigator.run(page, request.target_user, log_fields=fields)

        await self._wait_for_profile(page, profile, fields)

        final_url = page.url
        final_state = classify_page(final_url, profile.base_url)
        reached = not final_state.is_unresolved and is_http_url(final_url)

        error: str | None = None
        if final_state.is_unresolved:
            error = STUCK_ERROR_MESSAGE
        elif not reached:
            error = navigation_error or f"navigation failed: page never loaded (url={final_url!r})"

        log_event(
            logger,
            logging.INFO if reached else logging.WARNING,
            "navigation_finished",
            url=final_url,
            final_state=final_state.value,
            reached_profile=reached,
            used_fallback_search=used_fallback,
            search_strategy=search.strategy if search else None,
            search_error=search.error if search else None,
            **fields,
        )
        return NavigationOutcome(
            final_url=final_url,
            reached_profile=reached,
            used_fallback_search=used_fallback,
            final_state=final_state,
            error=error,
        )

    async def extract(
        self,
        session: ProfileSession,
        request: ProfileRequest,
        outcome: NavigationOutcome,
    ) -> ExtractionResult:
        log_event(
            logger,
            logging.INFO,
            "extraction_started",
            url=outcome.final_url,
            **request_fields(request),
        )
        raw_text = await extract_page_text(
            session.page,
            timeout_ms=self._settings.content_timeout_ms,
        )
        stats = await self._stats_extractor.aextract(request.game, raw_text)
        return ExtractionResult(raw_text=raw_text, structured_stats=stats)

    def _profile_for(self, request: ProfileRequest) -> GameProfile:
        profile = self._profiles.get(request.game)
        if profile is None:
            raise GameConfigError(f"Game configuration not found for: {request.game}")
        return profile

    async def _goto(self, page: Page, url: str, fields: dict[str, Any]) -> str | None:
        try:
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self._settings.navigation_timeout_ms,
            )
            return None
        except Exception as exc:
            log_event(logger, logging.WARNING, "navigation_failed", url=url, error=str(exc), **fields)
            return f"navigation failed: {exc}"

    async def _wait_for_profile(self, page: Page, profile: GameProfile, fields: dict[str, Any]) -> None:
        try:
            await page.wait_for_load_state(
                "networkidle",
                timeout=self._settings.network_idle_timeout_ms,
            )
        except Exception:
            log_event(logger, logging.WARNING, "network_idle_timeout", url=page.url, **fields)

        try:
            await page.wait_for_selector(
                ", ".join(profile.profile_ready_selectors),
                timeout=self._settings.profile_ready_timeout_ms,
            )
        except Exception:
            log_event(logger, logging.WARNING, "profile_wait_timeout", url=page.url, **fields)
