from __future__ import annotations

import asyncio
import json
import logging

from app.scraping.browser import ProfileSession
from app.scraping.content import PRIMARY_CONTENT_SELECTOR
from app.scraping.page_state import PageState
from app.scraping.pipeline import ProfilePipeline
from app.scraping.reporter import STUCK_ERROR_MESSAGE
from app.scraping.search_navigator import AUTOCOMPLETE_OPTION_SELECTOR
from app.scraping.types import ProfileRequest
from llm_extraction.extractor import StructuredStatsExtractor
from tests.helpers import (
    MARVEL_BASE,
    VALORANT_BASE,
    WARZONE_BASE,
    FakeElement,
    FakeLLMAdapter,
    FakePage,
    go_to,
    make_profiles,
    make_settings,
)

SEARCH_INPUT = 'input[type="search"]'
WARZONE_PROFILE = f"{WARZONE_BASE}/profile/psn/Foo/overview"
STATS_JSON = json.dumps(
    {
        "username": "Foo",
        "rank": "Diamond II",
        "kills": "1,234",
        "matchesPlayed": "321",
        "winRate": None,
    }
)


def _pipeline(adapter: FakeLLMAdapter | None = None) -> ProfilePipeline:
    return ProfilePipeline(
        profiles=make_profiles(),
        settings=make_settings(),
        stats_extractor=StructuredStatsExtractor(adapter or FakeLLMAdapter(response=STATS_JSON)),
    )


def _run(pipeline: ProfilePipeline, page: FakePage, request: ProfileRequest):
    return asyncio.run(pipeline.process(ProfileSession(page=page), request))


def _warzone_request() -> ProfileRequest:
    return ProfileRequest(game="warzone", username="Foo", platform="psn")


def test_direct_url_success_extracts_stats() -> None:
    adapter = FakeLLMAdapter(response=STATS_JSON)
    page = FakePage(elements={PRIMARY_CONTENT_SELECTOR: FakeElement(text="Foo Rank Diamond II Kills 1,234")})

    record = _run(_pipeline(adapter), page, _warzone_request())

    assert record.to_payload() == {
        "status": "success",
        "game": "warzone",
        "user": "Foo",
        "url": WARZONE_PROFILE,
        "stats": {
            "username": "Foo",
            "rank": "Diamond II",
            "kills": "1,234",
            "matchesPlayed": "321",
            "winRate": None,
        },
    }
    assert page.actions[0] == ("goto", WARZONE_PROFILE, "domcontentloaded", 90_000)
    assert adapter.calls[0][1] == "Foo Rank Diamond II Kills 1,234"


def test_body_text_used_when_primary_container_missing() -> None:
    adapter = FakeLLMAdapter(response=STATS_JSON)
    page = FakePage(elements={"body": FakeElement(text="whole body")})

    _run(_pipeline(adapter), page, _warzone_request())

    assert adapter.calls[0][1] == "whole body"


def test_redirect_to_home_without_search_box_is_stuck() -> None:
    adapter = FakeLLMAdapter(response=STATS_JSON)
    page = FakePage(redirects={WARZONE_PROFILE: WARZONE_BASE})

    record = _run(_pipeline(adapter), page, _warzone_request())

    assert record.to_payload() == {
        "status": "failed",
        "game": "warzone",
        "user": "Foo",
        "url": WARZONE_BASE,
        "error": STUCK_ERROR_MESSAGE,
    }
    assert adapter.calls == []


def test_redirect_to_home_recovers_through_search() -> None:
    page = FakePage(
        redirects={WARZONE_PROFILE: WARZONE_BASE + "/"},
        elements={
            SEARCH_INPUT: FakeElement(),
            AUTOCOMPLETE_OPTION_SELECTOR: FakeElement(on_click=go_to(WARZONE_PROFILE)),
        },
    )

    record = _run(_pipeline(), page, _warzone_request())

    assert record.succeeded
    assert record.url == WARZONE_PROFILE


def test_invalid_model_output_is_success_with_null_stats() -> None:
    adapter = FakeLLMAdapter(response="not json at all")
    page = FakePage(elements={PRIMARY_CONTENT_SELECTOR: FakeElement(text="Foo")})

    record = _run(_pipeline(adapter), page, _warzone_request())

    assert record.succeeded
    assert record.to_payload()["stats"] is None


def test_game_without_direct_pattern_goes_straight_to_search() -> None:
    profile_url = f"{VALORANT_BASE}/profile/riot/Foo%231/overview"
    page = FakePage(
        elements={
            SEARCH_INPUT: FakeElement(),
            AUTOCOMPLETE_OPTION_SELECTOR: FakeElement(on_click=go_to(profile_url)),
        },
    )
    request = ProfileRequest(game="valorant", username="Foo#1", platform="riot")

    outcome = asyncio.run(_pipeline().navigate(ProfileSession(page=page), request))

    assert page.actions[0][1] == VALORANT_BASE
    assert outcome.used_fallback_search
    assert outcome.reached_profile
    assert outcome.final_url == profile_url


def test_search_results_dead_end_is_stuck() -> None:
    results_url = f"{VALORANT_BASE}/search?q=Foo"
    page = FakePage(
        elements={SEARCH_INPUT: FakeElement(on_press=lambda p, key: go_to(results_url)(p))},
    )
    request = ProfileRequest(game="valorant", username="Foo", platform="riot")

    outcome = asyncio.run(_pipeline().navigate(ProfileSession(page=page), request))

    assert outcome.final_state is PageState.SEARCH_RESULTS
    assert not outcome.reached_profile
    assert outcome.error == STUCK_ERROR_MESSAGE


def test_alternate_id_is_typed_but_direct_url_uses_username() -> None:
    direct = f"{MARVEL_BASE}/profile/steam/Foo/overview"
    profile_url = f"{MARVEL_BASE}/profile/steam/Bar/overview"
    page = FakePage(
        redirects={direct: MARVEL_BASE},
        elements={
            SEARCH_INPUT: FakeElement(),
            AUTOCOMPLETE_OPTION_SELECTOR: FakeElement(on_click=go_to(profile_url)),
        },
    )
    request = ProfileRequest(
        game="marvel-rivals",
        username="Foo",
        platform="steam",
        marvel_id="Bar",
        use_alternate_id=True,
    )

    record = _run(_pipeline(), page, request)

    assert page.actions[0][1] == direct
    assert ("type", SEARCH_INPUT, "Bar", 150) in page.actions
    assert record.user == "Bar"
    assert record.url == profile_url


def test_navigation_error_without_page_reports_failure() -> None:
    page = FakePage(goto_error=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))

    record = _run(_pipeline(), page, _warzone_request())

    assert not record.succeeded
    assert record.error == "navigation failed: net::ERR_NAME_NOT_RESOLVED"
    assert record.url is None
    assert "url" not in record.to_payload()


def test_settle_wait_timeouts_are_not_fatal() -> None:
    page = FakePage(
        network_idle=False,
        profile_ready=False,
        elements={PRIMARY_CONTENT_SELECTOR: FakeElement(text="Foo")},
    )

    record = _run(_pipeline(), page, _warzone_request())

    assert record.succeeded
    ready_wait = next(action for action in page.actions if action[0] == "wait_for_selector")
    assert ready_wait[1] == ".user-info, .profile-header, .stat, .main-content"


def _finished_event(caplog) -> dict:
    events = [json.loads(record.getMessage()) for record in caplog.records if record.name == "app.scraping.pipeline"]
    return next(event for event in events if event["event"] == "navigation_finished")


def test_navigation_log_names_winning_search_strategy(caplog) -> None:
    caplog.set_level(logging.INFO, logger="app.scraping.pipeline")
    page = FakePage(
        redirects={WARZONE_PROFILE: WARZONE_BASE},
        elements={
            SEARCH_INPUT: FakeElement(),
            AUTOCOMPLETE_OPTION_SELECTOR: FakeElement(on_click=go_to(WARZONE_PROFILE)),
        },
    )

    asyncio.run(_pipeline().navigate(ProfileSession(page=page), _warzone_request()))

    event = _finished_event(caplog)
    assert event["search_strategy"] == "autocomplete"
    assert event["search_error"] is None


def test_navigation_log_carries_search_failure(caplog) -> None:
    caplog.set_level(logging.INFO, logger="app.scraping.pipeline")
    page = FakePage(redirects={WARZONE_PROFILE: WARZONE_BASE})

    asyncio.run(_pipeline().navigate(ProfileSession(page=page), _warzone_request()))

    event = _finished_event(caplog)
    assert event["search_strategy"] is None
    assert "Search input not found" in event["search_error"]
