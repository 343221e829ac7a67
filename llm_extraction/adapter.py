"""Model-service adapters used by stats extraction.

Each adapter takes the fixed extraction instruction plus one page text
snapshot and returns whatever string the model produced. Parsing and
validation happen downstream in ``llm_extraction.validator``.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from openai import OpenAI


class BaseLLMAdapter(ABC):
    """Interface every extraction backend implements."""

    @abstractmethod
    def generate(self, system_prompt: str, user_text: str) -> str:
        """Return the raw model reply for one page snapshot."""


class OpenAILLMAdapter(BaseLLMAdapter):
    """Chat-completions adapter for OpenAI and compatible endpoints.

    Requests a JSON object at temperature 0 so the same page text yields
    the same stats. Client errors (timeouts, HTTP failures) propagate to
    the caller unchanged.
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        max_tokens: int = 1024,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
        max_retries: int = 0,
    ) -> None:
        """
        Args:
            model: Chat model name.
            max_tokens: Completion budget; five short strings fit easily.
            api_key: Explicit key, else OPENAI_API_KEY.
            base_url: Optional OpenAI-compatible endpoint.
            timeout_seconds: Per-call client timeout.
            max_retries: Retries done inside the client itself.
        """
        self._client = OpenAI(
            api_key=api_key or os.environ.get("OPENAI_API_KEY", ""),
            base_url=base_url or None,
            timeout=timeout_seconds,
            max_retries=max(0, max_retries),
        )
        self._model = model
        self._max_tokens = max_tokens

    @staticmethod
    def _messages(system_prompt: str, user_text: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]

    def generate(self, system_prompt: str, user_text: str) -> str:
        completion = self._client.chat.completions.create(
            model=self._model,
            messages=self._messages(system_prompt, user_text),
            response_format={"type": "json_object"},
            temperature=0,
            max_tokens=self._max_tokens,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""


DEFAULT_MOCK_STATS: Dict[str, Any] = {
    "username": "MockPlayer",
    "rank": "Diamond II",
    "kills": "1,234",
    "matchesPlayed": "321",
    "winRate": None,
}


class MockLLMAdapter(BaseLLMAdapter):
    """Offline adapter for LLM_ADAPTER=mock; needs no API key.

    Always answers with the same stats object, ignoring the page text.
    """

    def __init__(self, stats: Optional[Dict[str, Any]] = None) -> None:
        self._reply = json.dumps(stats if stats is not None else DEFAULT_MOCK_STATS)

    def generate(self, system_prompt: str, user_text: str) -> str:
        return self._reply
