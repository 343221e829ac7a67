"""
Playwright browser lifecycle and per-request sessions.

One browser process is shared by the batch; every request gets its own
context and page, closed when the request finishes.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Route, async_playwright

from app.scraping.config.models import ProfileScrapingSettings
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

BLOCKED_RESOURCE_TYPES = frozenset({"image", "media", "font"})


@dataclass(frozen=True)
class ProfileSession:
    """
    Browser handle owned by exactly one in-flight request.
    """

    page: Page
    context: BrowserContext | None = None


class BrowserSessionFactory:
    """
    Starts Chromium once and hands out isolated per-request sessions.
    """

    def __init__(self, *, settings: ProfileScrapingSettings) -> None:
        self._settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def start(self) -> None:
        if self._browser is not None:
            return

        launch_kwargs: dict[str, Any] = {"headless": self._settings.headless}
        if self._settings.proxy_server:
            launch_kwargs["proxy"] = {"server": self._settings.proxy_server}

        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(**launch_kwargs)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        log_event(
            logger,
            logging.INFO,
            "browser_started",
            headless=self._settings.headless,
            proxy=bool(self._settings.proxy_server),
        )

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def __aenter__(self) -> "BrowserSessionFactory":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @asynccontextmanager
    async def open_session(self) -> AsyncIterator[ProfileSession]:
        """
        Yield a fresh context + page with viewport, user agent and media blocking.
        """

        if self._browser is None:
            raise RuntimeError("BrowserSessionFactory.start() must be called before open_session().")

        context = await self._browser.new_context(
            user_agent=self._settings.user_agent,
            viewport={
                "width": self._settings.viewport_width,
                "height": self._settings.viewport_height,
            },
            locale="en-US",
        )
        try:
            context.set_default_navigation_timeout(self._settings.navigation_timeout_ms)
            await context.route("**/*", self._route_handler)
            page = await context.new_page()
            yield ProfileSession(page=page, context=context)
        finally:
            try:
                await context.close()
            except Exception as exc:
                logger.debug("Browser context close failed: %s", exc)

    async def _route_handler(self, route: Route) -> None:
        request = route.request
        if request.resource_type in BLOCKED_RESOURCE_TYPES or self._is_blocked_extension(request.url):
            await route.abort()
            return
        await route.continue_()

    def _is_blocked_extension(self, url: str) -> bool:
        path = url.split("?", 1)[0].split("#", 1)[0].lower()
        return any(path.endswith(f".{ext}") for ext in self._settings.blocked_extensions)
