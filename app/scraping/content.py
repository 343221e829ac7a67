"""
Visible text capture from the rendered page.
"""

from __future__ import annotations

import logging

from playwright.async_api import Page

logger = logging.getLogger(__name__)

PRIMARY_CONTENT_SELECTOR = "main, #app"
FALLBACK_CONTENT_SELECTOR = "body"


async def extract_page_text(
    page: Page,
    *,
    timeout_ms: int = 2_000,
    primary_selector: str = PRIMARY_CONTENT_SELECTOR,
) -> str:
    """
    Read the primary content container's text, falling back to the whole body.

    No length cap is applied here.
    """

    try:
        return await page.locator(primary_selector).first.inner_text(timeout=timeout_ms)
    except Exception as exc:
        logger.debug("Primary content %r unavailable, reading body: %s", primary_selector, exc)

    try:
        return await page.locator(FALLBACK_CONTENT_SELECTOR).inner_text()
    except Exception as exc:
        logger.warning("Unable to read page body text: %s", exc)
        return ""
