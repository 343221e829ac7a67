"""Structured stats extraction over an LLM adapter.

Failures of the external model never escape this module: transport
errors, malformed JSON and schema violations all resolve to ``None``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from llm_extraction.adapter import BaseLLMAdapter
from llm_extraction.prompt_builder import StatsPromptBuilder
from llm_extraction.schema import PlayerStats
from llm_extraction.validator import LLMOutputValidationError, validate_llm_output

logger = logging.getLogger(__name__)


class StructuredStatsExtractor:
    """Turns a page text snapshot into PlayerStats, or None."""

    def __init__(
        self,
        adapter: BaseLLMAdapter,
        prompt_builder: Optional[StatsPromptBuilder] = None,
    ) -> None:
        self._adapter = adapter
        self._prompt_builder = prompt_builder or StatsPromptBuilder()

    def extract(self, game: str, raw_text: str) -> Optional[PlayerStats]:
        """Run one extraction call.

        Args:
            game: Game key, named in the system instruction.
            raw_text: Unbounded page text; truncated before sending.

        Returns:
            Validated PlayerStats, or None when the model call or its
            output could not be used.
        """
        prompt = self._prompt_builder.build_prompt(game, raw_text)
        if prompt.truncated:
            logger.info(
                "Page text for game=%s truncated from %d to %d chars",
                game,
                len(raw_text),
                self._prompt_builder.max_input_chars,
            )

        try:
            raw = self._adapter.generate(prompt.system, prompt.user)
        except Exception as exc:
            logger.error("Stats extraction transport error for game=%s: %s", game, exc)
            return None

        try:
            return validate_llm_output(raw)
        except LLMOutputValidationError as exc:
            logger.error(
                "Stats extraction output rejected for game=%s at stage '%s': %s",
                game,
                exc.stage,
                "; ".join(exc.errors),
            )
            return None

    async def aextract(self, game: str, raw_text: str) -> Optional[PlayerStats]:
        """Async wrapper running the blocking adapter call in a worker thread."""
        return await asyncio.to_thread(self.extract, game, raw_text)
