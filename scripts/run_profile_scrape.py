"""
Run profile stats scraping from CLI.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from app.scraping.logging_utils import configure_logging
from app.scraping.types import PlayerSpec
from app.services.profile_scraping_service import SINK_DATABASE, SINK_JSONL, ProfileScrapingService


def _load_players(path: str) -> list[PlayerSpec]:
    raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    payload = json.loads(raw)
    players = payload.get("players", []) if isinstance(payload, dict) else payload
    if not isinstance(players, list):
        raise ValueError("Input must be a JSON list of players or an object with a 'players' list.")
    return [PlayerSpec.from_payload(item) for item in players if isinstance(item, dict)]


def main() -> int:
    parser = argparse.ArgumentParser(description="Scrape player profile stats.")
    parser.add_argument(
        "--input",
        dest="input_path",
        default="-",
        help="Path to a JSON file with {'players': [...]}, or '-' for stdin.",
    )
    parser.add_argument(
        "--sink",
        dest="sink",
        choices=[SINK_JSONL, SINK_DATABASE],
        default=None,
        help="Override PROFILE_SCRAPE_SINK.",
    )
    args = parser.parse_args()

    configure_logging()
    players = _load_players(args.input_path)
    service = ProfileScrapingService()
    sink_name = args.sink or service.settings.sink

    if sink_name == SINK_DATABASE:
        from db.session import session_scope

        with session_scope() as db:
            sink = service.build_sink(sink_name=sink_name, db=db)
            result = asyncio.run(service.scrape(players=players, sink=sink))
    else:
        sink = service.build_sink(sink_name=sink_name)
        result = asyncio.run(service.scrape(players=players, sink=sink))

    payload = {
        "records": [record.to_payload() for record in result.records],
        "skipped_games": result.skipped_games,
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
