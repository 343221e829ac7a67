"""Turns a raw model reply into PlayerStats or a typed rejection."""

import json
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from llm_extraction.schema import STATS_FIELDS, PlayerStats

_FENCED = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class LLMOutputValidationError(Exception):
    """The model reply could not be turned into PlayerStats.

    Attributes:
        stage: "json_parse" when no JSON object could be read,
            "schema" when the object did not fit PlayerStats.
        errors: Human-readable problems, one per entry.
        raw_response: The reply exactly as received.
    """

    def __init__(self, stage: str, errors: List[str], raw_response: str) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        super().__init__(f"stats output rejected at '{stage}': {'; '.join(errors)}")


def _unwrap(text: str) -> str:
    stripped = text.strip()
    fenced = _FENCED.match(stripped)
    return fenced.group(1) if fenced else stripped


def _load_json(raw_response: str) -> Any:
    """Strict parse after fence stripping; surrounding prose is a parse failure."""
    try:
        return json.loads(_unwrap(raw_response))
    except json.JSONDecodeError as exc:
        raise LLMOutputValidationError("json_parse", [str(exc)], raw_response) from exc


def _schema_errors(exc: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]


def validate_llm_output(raw_response: str) -> PlayerStats:
    """Validate one model reply.

    Unknown keys are dropped and missing keys become None before the
    PlayerStats model sees the payload, so only the value types can fail.

    Raises:
        LLMOutputValidationError: on unreadable JSON or a schema mismatch.
    """
    if not isinstance(raw_response, str):
        raise LLMOutputValidationError(
            "json_parse",
            [f"expected str response, got {type(raw_response).__name__}"],
            str(raw_response),
        )

    data = _load_json(raw_response)
    if not isinstance(data, dict):
        raise LLMOutputValidationError(
            "schema", ["top-level JSON must be an object"], raw_response
        )

    projected: Dict[str, Any] = {key: data.get(key) for key in STATS_FIELDS}
    try:
        return PlayerStats.model_validate(projected)
    except ValidationError as exc:
        raise LLMOutputValidationError("schema", _schema_errors(exc), raw_response) from exc
