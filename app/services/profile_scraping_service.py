"""
app/services/profile_scraping_service.py

Service orchestration for player profile stats scraping.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import lru_cache

from sqlalchemy.orm import Session

from app.config import ConfigurationError, LLMSettings, get_llm_settings, validate_llm_settings
from app.scraping.browser import BrowserSessionFactory
from app.scraping.config import (
    GameProfile,
    ProfileScrapingSettings,
    get_profile_scraping_settings,
    load_game_profiles,
)
from app.scraping.engine import ProfileScrapingEngine
from app.scraping.storage import JsonLinesResultSink, ResultSink, SQLAlchemyResultSink
from app.scraping.types import BatchResult, PlayerSpec
from llm_extraction.adapter import BaseLLMAdapter, MockLLMAdapter, OpenAILLMAdapter
from llm_extraction.extractor import StructuredStatsExtractor
from llm_extraction.prompt_builder import StatsPromptBuilder

SINK_JSONL = "jsonl"
SINK_DATABASE = "database"


def build_llm_adapter(settings: LLMSettings) -> BaseLLMAdapter:
    """Instantiate the adapter selected by LLM_ADAPTER.

    LLM_ADAPTER=mock   -> MockLLMAdapter  (testing, no API key required)
    LLM_ADAPTER=openai -> OpenAILLMAdapter (default)
    """
    if settings.adapter == "mock":
        return MockLLMAdapter()

    return OpenAILLMAdapter(
        model=settings.model,
        max_tokens=settings.max_tokens,
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout_seconds=settings.timeout_seconds,
        max_retries=settings.max_retries,
    )


def build_stats_extractor(settings: LLMSettings) -> StructuredStatsExtractor:
    return StructuredStatsExtractor(
        adapter=build_llm_adapter(settings),
        prompt_builder=StatsPromptBuilder(max_input_chars=settings.max_input_chars),
    )


class ProfileScrapingService:
    """
    Validates configuration up front, then runs scrape batches into a sink.
    """

    def __init__(
        self,
        *,
        settings: ProfileScrapingSettings | None = None,
        llm_settings: LLMSettings | None = None,
        profiles: Mapping[str, GameProfile] | None = None,
        stats_extractor: StructuredStatsExtractor | None = None,
    ) -> None:
        self._settings = settings or get_profile_scraping_settings()
        self._profiles = profiles or load_game_profiles(config_path=self._settings.games_config_path)
        if stats_extractor is None:
            resolved_llm = validate_llm_settings(llm_settings or get_llm_settings())
            stats_extractor = build_stats_extractor(resolved_llm)
        self._stats_extractor = stats_extractor

    @property
    def settings(self) -> ProfileScrapingSettings:
        return self._settings

    @property
    def profiles(self) -> Mapping[str, GameProfile]:
        return self._profiles

    def build_sink(self, *, sink_name: str | None = None, db: Session | None = None) -> ResultSink:
        name = (sink_name or self._settings.sink).strip().lower()
        if name == SINK_JSONL:
            return JsonLinesResultSink(path=self._settings.output_path)
        if name == SINK_DATABASE:
            if db is None:
                raise ConfigurationError("The database sink requires a database session.")
            return SQLAlchemyResultSink(session=db)
        raise ConfigurationError(
            f"PROFILE_SCRAPE_SINK '{name}' is not valid. "
            f"Allowed values: {sorted({SINK_JSONL, SINK_DATABASE})}."
        )

    async def scrape(
        self,
        *,
        players: Sequence[PlayerSpec],
        sink: ResultSink,
        session_factory: BrowserSessionFactory | None = None,
    ) -> BatchResult:
        engine = ProfileScrapingEngine(
            settings=self._settings,
            profiles=self._profiles,
            sink=sink,
            stats_extractor=self._stats_extractor,
            session_factory=session_factory,
        )
        return await engine.run(players)


@lru_cache(maxsize=1)
def get_profile_scraping_service() -> ProfileScrapingService:
    """
    Build and cache profile scraping service.
    """

    return ProfileScrapingService()
