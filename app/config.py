"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_ALLOWED_LLM_ADAPTERS = {"openai", "mock"}


class ConfigurationError(RuntimeError):
    """
    Fatal misconfiguration detected before any scraping work starts.
    """


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class LLMSettings:
    """
    Language-model service settings for stats extraction.
    """

    adapter: str = "openai"
    model: str = "gpt-4o"
    api_key: str | None = None
    base_url: str | None = None
    max_tokens: int = 1024
    timeout_seconds: float = 60.0
    max_retries: int = 0
    max_input_chars: int = 45_000


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Return cached LLM settings from environment variables.
    """

    return LLMSettings(
        adapter=_get_str_env("LLM_ADAPTER", "openai").lower(),
        model=_get_str_env("LLM_MODEL", "gpt-4o"),
        api_key=_get_optional_str_env("LLM_API_KEY") or _get_optional_str_env("OPENAI_API_KEY"),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        max_tokens=max(64, _get_int_env("LLM_MAX_TOKENS", 1024)),
        timeout_seconds=max(1.0, _get_float_env("LLM_TIMEOUT_SECONDS", 60.0)),
        max_retries=max(0, _get_int_env("LLM_MAX_RETRIES", 0)),
        max_input_chars=max(1_000, _get_int_env("LLM_MAX_INPUT_CHARS", 45_000)),
    )


def validate_llm_settings(settings: LLMSettings) -> LLMSettings:
    """
    Raise ConfigurationError for an unknown adapter or a missing API key.

    The key check is skipped only for LLM_ADAPTER=mock.
    """

    if settings.adapter not in _ALLOWED_LLM_ADAPTERS:
        raise ConfigurationError(
            f"LLM_ADAPTER '{settings.adapter}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_LLM_ADAPTERS)}."
        )
    if settings.adapter != "mock" and not settings.api_key:
        raise ConfigurationError(
            "LLM API key is not set. Provide LLM_API_KEY or OPENAI_API_KEY, "
            "or set LLM_ADAPTER=mock."
        )
    return settings
