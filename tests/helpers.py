"""
tests/helpers.py

In-memory stand-ins for the browser driver, the language-model service and
the output sink. Nothing here touches the network or launches a browser.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from app.scraping.browser import ProfileSession
from app.scraping.config.models import GameProfile, ProfileScrapingSettings
from app.scraping.storage.base import ResultSink
from app.scraping.types import ResultRecord
from llm_extraction.adapter import BaseLLMAdapter

WARZONE_BASE = "https://cod.tracker.gg/warzone"
VALORANT_BASE = "https://tracker.gg/valorant"
MARVEL_BASE = "https://tracker.gg/marvel-rivals"


def make_settings(**overrides: Any) -> ProfileScrapingSettings:
    values: dict[str, Any] = {
        "games_config_path": "app/scraping/config/games.json",
        "concurrency": 1,
        "headless": True,
        "user_agent": "test-agent",
        "viewport_width": 1920,
        "viewport_height": 1080,
        "proxy_server": None,
        "blocked_extensions": ("png", "jpg", "jpeg", "mp4", "gif", "woff", "woff2"),
        "navigation_timeout_ms": 90_000,
        "consent_timeout_ms": 5_000,
        "typing_delay_ms": 150,
        "search_input_probe_timeout_ms": 500,
        "search_settle_ms": 2_000,
        "search_submit_wait_ms": 1_000,
        "network_idle_timeout_ms": 15_000,
        "profile_ready_timeout_ms": 10_000,
        "content_timeout_ms": 2_000,
        "request_timeout_seconds": 180.0,
        "sink": "jsonl",
        "output_path": "output/test_results.jsonl",
    }
    values.update(overrides)
    return ProfileScrapingSettings(**values)


def make_profiles() -> dict[str, GameProfile]:
    return {
        "warzone": GameProfile(
            game_key="warzone",
            base_url=WARZONE_BASE,
            platform_slug_map={"psn": "psn", "xbox": "xbl"},
            supports_direct_url=True,
        ),
        "valorant": GameProfile(
            game_key="valorant",
            base_url=VALORANT_BASE,
            platform_slug_map={"riot": "riot"},
            supports_direct_url=False,
        ),
        "marvel-rivals": GameProfile(
            game_key="marvel-rivals",
            base_url=MARVEL_BASE,
            platform_slug_map={"steam": "steam"},
            supports_direct_url=True,
            prefers_alternate_id=True,
        ),
    }


@dataclass
class FakeElement:
    """
    Scripted DOM match for one selector string.
    """

    count: int = 1
    visible: bool = True
    text: str | None = None
    on_click: Callable[["FakePage"], None] | None = None
    on_press: Callable[["FakePage", str], None] | None = None


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self._selector = selector

    @property
    def _element(self) -> FakeElement | None:
        return self._page.elements.get(self._selector)

    @property
    def first(self) -> "FakeLocator":
        return self

    async def count(self) -> int:
        element = self._element
        return element.count if element is not None else 0

    async def is_visible(self) -> bool:
        element = self._element
        return bool(element is not None and element.count > 0 and element.visible)

    async def click(self, timeout: int | None = None) -> None:
        self._page.actions.append(("click", self._selector))
        element = self._element
        if element is None or element.count == 0:
            raise TimeoutError(f"no element for {self._selector}")
        if element.on_click is not None:
            element.on_click(self._page)

    async def fill(self, value: str) -> None:
        self._page.actions.append(("fill", self._selector, value))

    async def press_sequentially(self, text: str, delay: float | None = None) -> None:
        self._page.actions.append(("type", self._selector, text, delay))

    async def press(self, key: str) -> None:
        self._page.actions.append(("press", self._selector, key))
        element = self._element
        if element is not None and element.on_press is not None:
            element.on_press(self._page, key)

    async def inner_text(self, timeout: int | None = None) -> str:
        element = self._element
        if element is None or element.count == 0 or element.text is None:
            raise TimeoutError(f"no text for {self._selector}")
        return element.text


@dataclass
class FakePage:
    """
    Minimal async Page double covering the calls the pipeline makes.
    """

    url: str = "about:blank"
    elements: dict[str, FakeElement] = field(default_factory=dict)
    redirects: dict[str, str] = field(default_factory=dict)
    goto_error: Exception | None = None
    profile_ready: bool = True
    network_idle: bool = True
    actions: list[tuple] = field(default_factory=list)
    waits: list[int] = field(default_factory=list)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def goto(self, url: str, wait_until: str | None = None, timeout: int | None = None) -> None:
        self.actions.append(("goto", url, wait_until, timeout))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = self.redirects.get(url, url)

    async def wait_for_timeout(self, timeout: int) -> None:
        self.waits.append(timeout)

    async def wait_for_load_state(self, state: str = "load", timeout: int | None = None) -> None:
        if not self.network_idle:
            raise TimeoutError("network never went idle")

    async def wait_for_selector(self, selector: str, timeout: int | None = None) -> None:
        self.actions.append(("wait_for_selector", selector, timeout))
        if not self.profile_ready:
            raise TimeoutError(f"selector {selector} never appeared")


class FakeSessionFactory:
    """
    Hands each request a fresh page from ``page_factory``.
    """

    def __init__(self, page_factory: Callable[[], FakePage]) -> None:
        self._page_factory = page_factory
        self.pages: list[FakePage] = []
        self.open_sessions = 0
        self.max_open_sessions = 0
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> "FakeSessionFactory":
        self.entered = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.exited = True

    @asynccontextmanager
    async def open_session(self):
        page = self._page_factory()
        self.pages.append(page)
        self.open_sessions += 1
        self.max_open_sessions = max(self.max_open_sessions, self.open_sessions)
        try:
            yield ProfileSession(page=page)
        finally:
            self.open_sessions -= 1


class FakeLLMAdapter(BaseLLMAdapter):
    """
    Returns a canned response, or raises ``error`` when set.
    """

    def __init__(self, response: str = "{}", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def generate(self, system_prompt: str, user_text: str) -> str:
        self.calls.append((system_prompt, user_text))
        if self.error is not None:
            raise self.error
        return self.response


class ListResultSink(ResultSink):
    def __init__(self, *, fail: bool = False) -> None:
        self.records: list[ResultRecord] = []
        self._fail = fail

    def append(self, record: ResultRecord) -> None:
        if self._fail:
            raise OSError("sink unavailable")
        self.records.append(record)


def go_to(url: str) -> Callable[[FakePage], None]:
    def _navigate(page: FakePage) -> None:
        page.url = url

    return _navigate
