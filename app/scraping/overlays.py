"""Overlay/consent handling helpers."""

from __future__ import annotations

import logging

from playwright.async_api import Page

logger = logging.getLogger(__name__)

CONSENT_BUTTON_SELECTOR = (
    'button:has-text("Accept"), button:has-text("Agree"), button[mode="primary"]'
)


async def dismiss_consent(page: Page, *, timeout_ms: int = 5_000) -> bool:
    """
    Click the first cookie-consent button if one is present. Best effort.
    """

    try:
        buttons = page.locator(CONSENT_BUTTON_SELECTOR)
        if await buttons.count() == 0:
            return False
        await buttons.first.click(timeout=timeout_ms)
        return True
    except Exception as exc:
        logger.debug("Consent dismissal skipped: %s", exc)
        return False
