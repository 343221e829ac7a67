"""
Interactive search fallback for sites whose direct profile URL is unknown
or did not hold.

The target site serves either a JS autocomplete dropdown or a plain submit
form depending on load, so selection is an ordered list of strategies tried
until one reports success.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Locator, Page

from app.scraping.logging_utils import log_event
from app.scraping.page_state import SEARCH_RESULTS_MARKER

logger = logging.getLogger(__name__)

SEARCH_INPUT_SELECTORS: tuple[str, ...] = (
    'input[type="search"]',
    ".search-container input",
    'input[placeholder*="Search"]',
)
AUTOCOMPLETE_OPTION_SELECTOR = 'div[class*="option"], .search-result, .force-search'
SEARCH_ICON_SELECTOR = '.fa-search, button[type="submit"], svg.search-icon'

SelectionStrategy = Callable[[Page, Locator], Awaitable[bool]]


class SearchInputNotFound(RuntimeError):
    """
    No candidate search input became visible within the probe window.
    """


@dataclass(frozen=True)
class SearchAttempt:
    """
    What the fallback search managed to do on the page.
    """

    input_found: bool
    strategy: str | None = None
    error: str | None = None


class SearchNavigator:
    """
    Drives a site's search box toward a player's profile page.
    """

    def __init__(
        self,
        *,
        typing_delay_ms: int = 150,
        settle_ms: int = 2_000,
        submit_wait_ms: int = 1_000,
        probe_timeout_ms: int = 3_000,
        probe_interval_ms: int = 250,
        input_selectors: Sequence[str] = SEARCH_INPUT_SELECTORS,
    ) -> None:
        self._typing_delay_ms = max(0, typing_delay_ms)
        self._settle_ms = max(0, settle_ms)
        self._submit_wait_ms = max(0, submit_wait_ms)
        self._probe_timeout_ms = max(0, probe_timeout_ms)
        self._probe_interval_ms = max(1, probe_interval_ms)
        self._input_selectors = tuple(input_selectors)

    async def run(
        self,
        page: Page,
        target_user: str,
        *,
        log_fields: dict[str, Any] | None = None,
    ) -> SearchAttempt:
        """
        Run the full search sequence. Never raises; failures are logged and
        reported on the returned SearchAttempt.
        """

        fields = dict(log_fields or {})
        try:
            search_input = await self.find_search_input(page)
        except SearchInputNotFound as exc:
            log_event(logger, logging.WARNING, "search_input_not_found", error=str(exc), **fields)
            return SearchAttempt(input_found=False, error=str(exc))
        except Exception as exc:
            log_event(logger, logging.WARNING, "search_interaction_failed", error=str(exc), **fields)
            return SearchAttempt(input_found=False, error=str(exc))

        try:
            await self.type_username(search_input, target_user)
            await page.wait_for_timeout(self._settle_ms)

            for name, strategy in self.selection_strategies():
                if await strategy(page, search_input):
                    log_event(
                        logger,
                        logging.INFO,
                        "search_selection_applied",
                        strategy=name,
                        url=page.url,
                        **fields,
                    )
                    return SearchAttempt(input_found=True, strategy=name)

            log_event(logger, logging.WARNING, "search_selection_exhausted", url=page.url, **fields)
            return SearchAttempt(input_found=True)
        except Exception as exc:
            log_event(logger, logging.WARNING, "search_interaction_failed", error=str(exc), **fields)
            return SearchAttempt(input_found=True, error=str(exc))

    async def find_search_input(self, page: Page) -> Locator:
        """
        Return the first visible candidate input, probing for a bounded window.
        """

        attempts = self._probe_timeout_ms // self._probe_interval_ms + 1
        for attempt in range(attempts):
            found = await self._probe_inputs(page)
            if found is not None:
                return found
            if attempt < attempts - 1:
                await page.wait_for_timeout(self._probe_interval_ms)

        raise SearchInputNotFound(
            "Search input not found in DOM "
            f"(selectors={list(self._input_selectors)}, waited={self._probe_timeout_ms}ms)."
        )

    async def _probe_inputs(self, page: Page) -> Locator | None:
        for selector in self._input_selectors:
            candidate = page.locator(selector).first
            try:
                if await candidate.is_visible():
                    return candidate
            except Exception:
                continue
        return None

    async def type_username(self, search_input: Locator, target_user: str) -> None:
        """
        Focus, clear, then type one key at a time so the site sees human-speed
        input and opens its autocomplete dropdown.
        """

        await search_input.click()
        await search_input.fill("")
        await search_input.press_sequentially(target_user, delay=self._typing_delay_ms)

    def selection_strategies(self) -> list[tuple[str, SelectionStrategy]]:
        return [
            ("autocomplete", self.click_autocomplete_option),
            ("enter_key", self.submit_with_enter),
            ("search_icon", self.click_search_icon),
        ]

    async def click_autocomplete_option(self, page: Page, search_input: Locator) -> bool:
        options = page.locator(AUTOCOMPLETE_OPTION_SELECTOR)
        if await options.count() == 0:
            return False
        await options.first.click()
        return True

    async def submit_with_enter(self, page: Page, search_input: Locator) -> bool:
        before = page.url
        await search_input.press("Enter")
        await page.wait_for_timeout(self._submit_wait_ms)
        after = page.url
        return after != before and SEARCH_RESULTS_MARKER not in after

    async def click_search_icon(self, page: Page, search_input: Locator) -> bool:
        if SEARCH_RESULTS_MARKER not in page.url:
            return False
        icon = page.locator(SEARCH_ICON_SELECTOR)
        if await icon.count() == 0:
            return False
        if not await icon.first.is_visible():
            return False
        await icon.first.click()
        return True
