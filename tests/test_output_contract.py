import json

import pytest
from pydantic import ValidationError

from app.scraping.types import (
    STATUS_FAILED,
    STATUS_SUCCESS,
    PlayerSpec,
    ProfileRequest,
    ResultRecord,
)
from llm_extraction.schema import PlayerStats


def _stats_payload() -> dict:
    return {
        "username": "Foo",
        "rank": "Platinum I",
        "kills": "9,001",
        "matchesPlayed": "450",
        "winRate": "12.5%",
    }


def test_player_stats_contract() -> None:
    stats = PlayerStats(**_stats_payload())

    assert set(stats.model_dump().keys()) == {
        "username",
        "rank",
        "kills",
        "matchesPlayed",
        "winRate",
    }
    parsed = json.loads(stats.model_dump_json())
    assert parsed["rank"] == "Platinum I"


def test_player_stats_rejects_extra_fields() -> None:
    data = _stats_payload()
    data["headshots"] = "12"
    with pytest.raises(ValidationError):
        PlayerStats(**data)


def test_player_stats_all_fields_optional() -> None:
    assert PlayerStats().model_dump() == dict.fromkeys(_stats_payload())


def test_success_record_shape() -> None:
    record = ResultRecord(
        status=STATUS_SUCCESS,
        game="warzone",
        user="Foo",
        url="https://cod.tracker.gg/warzone/profile/psn/Foo/overview",
        stats=PlayerStats(**_stats_payload()),
    )

    payload = record.to_payload()

    assert set(payload.keys()) == {"status", "game", "user", "url", "stats"}
    assert payload["status"] == "success"
    assert payload["stats"]["kills"] == "9,001"
    json.dumps(payload)


def test_success_record_with_null_stats() -> None:
    record = ResultRecord(status=STATUS_SUCCESS, game="apex", user="Foo", url="https://x/y")
    assert record.to_payload()["stats"] is None


def test_failure_record_shape() -> None:
    record = ResultRecord(status=STATUS_FAILED, game="warzone", user="Foo", error="boom")

    assert record.to_payload() == {
        "status": "failed",
        "game": "warzone",
        "user": "Foo",
        "error": "boom",
    }
    assert not record.succeeded


def test_failure_record_keeps_url_and_never_empty_error() -> None:
    record = ResultRecord(status=STATUS_FAILED, game="apex", user="Foo", url="https://apex.tracker.gg/apex")

    payload = record.to_payload()

    assert payload["url"] == "https://apex.tracker.gg/apex"
    assert payload["error"] == "unknown error"


def test_player_spec_from_payload_normalizes_games() -> None:
    player = PlayerSpec.from_payload(
        {
            "username": " Foo ",
            "platform": "psn",
            "games": ["Warzone", " apex ", ""],
            "marvelId": "  ",
        }
    )

    assert player.username == "Foo"
    assert player.games == ("warzone", "apex")
    assert player.marvel_id is None


def test_player_spec_accepts_single_game_string() -> None:
    player = PlayerSpec.from_payload({"username": "Foo", "platform": "pc", "games": "fortnite"})
    assert player.games == ("fortnite",)


def test_target_user_prefers_alternate_id_only_when_enabled() -> None:
    base = dict(game="marvel-rivals", username="Foo", platform="steam", marvel_id="Bar#9")

    assert ProfileRequest(**base, use_alternate_id=True).target_user == "Bar#9"
    assert ProfileRequest(**base).target_user == "Foo"
    assert ProfileRequest(
        game="marvel-rivals",
        username="Foo",
        platform="steam",
        use_alternate_id=True,
    ).target_user == "Foo"


def test_failure_record_drops_non_http_url() -> None:
    from app.scraping.reporter import failure_record

    request = ProfileRequest(game="warzone", username="Foo", platform="psn")

    assert "url" not in failure_record(request, "boom", url="chrome-error://chromewebdata/").to_payload()
    assert failure_record(request, "boom", url="https://cod.tracker.gg/warzone").url == "https://cod.tracker.gg/warzone"
