"""Structured prompt builder for player stats extraction."""

import json
from dataclasses import dataclass

from llm_extraction.schema import PlayerStats

DEFAULT_MAX_INPUT_CHARS = 45_000

_SCHEMA_JSON = json.dumps(PlayerStats.model_json_schema(), indent=2)

_SYSTEM_TEMPLATE = """\
You are a strict data extraction engine.
Task: Extract player stats for "{game}" from the provided website text.

Output Format: JSON
Schema: {{ "username": string, "rank": string, "kills": string, "matchesPlayed": string, "winRate": string }}

STRICT RULES:
- If a stat is not explicitly present in the text, use null.
- Do NOT calculate, estimate, or invent any value.
- Use ONLY the text provided by the user message.
- Return exactly one JSON object with the five keys above and no other keys.
- Do NOT include any text outside the JSON object.

# OUTPUT SCHEMA

```json
{schema}
```
"""


@dataclass(frozen=True)
class ExtractionPrompt:
    """System instruction plus the (already truncated) page text."""

    system: str
    user: str
    truncated: bool


class StatsPromptBuilder:
    """Builds the fixed extraction contract sent to the model.

    The page text is capped at ``max_input_chars`` before it leaves the
    process; capture code upstream applies no bound of its own.
    """

    def __init__(self, max_input_chars: int = DEFAULT_MAX_INPUT_CHARS) -> None:
        self._max_input_chars = max(1, max_input_chars)

    @property
    def max_input_chars(self) -> int:
        return self._max_input_chars

    def build_prompt(self, game: str, raw_text: str) -> ExtractionPrompt:
        """Build the system/user message pair for one page snapshot.

        Args:
            game: Game key the page belongs to.
            raw_text: Plain text captured from the rendered page.

        Returns:
            An ExtractionPrompt ready for an adapter.
        """
        text = raw_text or ""
        truncated = len(text) > self._max_input_chars
        return ExtractionPrompt(
            system=_SYSTEM_TEMPLATE.format(game=game, schema=_SCHEMA_JSON),
            user=text[: self._max_input_chars],
            truncated=truncated,
        )
