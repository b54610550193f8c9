"""Smoke tests for the local FastAPI match API."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import HTTPException

import server.main as main_module
import server.session as session_module
from engine.player import Player
from server.main import get_events, get_match, health, list_games, new_match
from server.schemas import CreateMatchRequest
from server.session import SessionStore


class _FailingPlayer(Player):
    """Player whose decisions always fail, for error-reporting coverage."""

    def decision(self, game: Any, state: Any, role: str) -> Any:
        raise RuntimeError("engine room on fire")


def _use_fresh_store(monkeypatch) -> None:
    monkeypatch.setattr(main_module, "store", SessionStore())


def _patch_failing_player_type(monkeypatch) -> None:
    original_factory = session_module.create_player

    def _patched_factory(config, *, role, seed=None):
        if str(config.get("type", "")).lower() == "failing":
            return _FailingPlayer(name=f"failing-{role.lower()}")
        return original_factory(config, role=role, seed=seed)

    monkeypatch.setattr(session_module, "create_player", _patched_factory)


def _new_match(payload: dict) -> dict:
    return asyncio.run(new_match(CreateMatchRequest.model_validate(payload)))


def _expect_http_error(fn, expected_status: int) -> str:
    try:
        fn()
    except HTTPException as exc:
        assert exc.status_code == expected_status
        return str(exc.detail)
    raise AssertionError("Expected HTTPException to be raised.")


def test_health_and_game_listing() -> None:
    assert health() == {"status": "ok"}
    listing = list_games()
    assert listing["games"]["pig"] == ["One", "Two"]
    assert "uct" in listing["player_types"]
    assert "rulebased" in listing["player_types"]


def test_match_api_flow_create_view_events(monkeypatch) -> None:
    _use_fresh_store(monkeypatch)
    created = _new_match(
        {
            "game": "tictactoe",
            "seed": 123,
            "players": {"Xs": {"type": "minimax", "horizon": 2}, "Os": "random"},
        }
    )

    match_id = created["match_id"]
    assert created["players"] == {"Xs": "minimax:h2", "Os": "random"}
    assert created["summary"]["termination_reason"] == "finished"
    assert created["result"] is not None
    assert len(created["history"]) == created["ply"] + 1
    assert created["error"] is None

    replay_start = get_match(match_id=match_id, ply=0)
    assert replay_start["ply"] == 0
    assert replay_start["state"] == {"board": "_________"}

    events = get_events(match_id=match_id, format="array")
    assert events[0]["event_type"] == "begin"
    assert events[-1]["event_type"] == "end"

    jsonl = get_events(match_id=match_id, format="jsonl")
    assert len(jsonl.body.decode("utf-8").splitlines()) == len(events)


def test_match_api_plays_chance_and_simultaneous_games(monkeypatch) -> None:
    _use_fresh_store(monkeypatch)
    pig = _new_match({"game": "pig", "seed": 5, "config": {"goal": 15}})
    assert pig["summary"]["termination_reason"] == "finished"
    assert any(entry["haps"] for entry in pig["history"])

    odds = _new_match(
        {
            "game": "oddsandevens",
            "seed": 6,
            "config": {"turns": 3},
            "players": {"Evens": {"type": "uct", "simulation_count": 20, "time_cap": None}},
        }
    )
    assert odds["summary"]["termination_reason"] == "finished"
    assert odds["ply"] == 3


def test_match_api_uses_time_seed_when_seed_is_omitted(monkeypatch) -> None:
    _use_fresh_store(monkeypatch)
    fake_time_ns = 1_730_000_000_123_456_789
    monkeypatch.setattr(main_module.time, "time_ns", lambda: fake_time_ns)

    created = _new_match({"game": "tictactoe"})

    expected_seed = int(fake_time_ns & 0x7FFFFFFF) or 1
    assert created["summary"]["seed"] == expected_seed


def test_max_plies_is_reported(monkeypatch) -> None:
    _use_fresh_store(monkeypatch)
    created = _new_match({"game": "tictactoe", "seed": 1, "max_plies": 2})

    assert created["summary"]["termination_reason"] == "max_plies"
    assert created["ply"] == 2
    assert created["result"] is None


def test_player_failures_are_reported_in_the_view(monkeypatch) -> None:
    _use_fresh_store(monkeypatch)
    _patch_failing_player_type(monkeypatch)

    created = _new_match({"game": "tictactoe", "seed": 2, "players": {"Xs": {"type": "failing"}}})

    assert created["summary"]["termination_reason"] == "player_error"
    assert created["error"]["type"] == "PlayerExecutionError"
    assert created["error"]["role"] == "Xs"


def test_invalid_requests_are_rejected(monkeypatch) -> None:
    _use_fresh_store(monkeypatch)

    detail = _expect_http_error(lambda: _new_match({"game": "pig", "players": {"Three": "random"}}), 400)
    assert "Three" in detail
    _expect_http_error(lambda: _new_match({"game": "oddsandevens", "players": {"Evens": "minimax"}}), 400)
    _expect_http_error(lambda: _new_match({"game": "pig", "players": {"One": {"type": "oracle"}}}), 400)
    _expect_http_error(lambda: get_match(match_id="missing", ply=None), 404)
    _expect_http_error(lambda: get_events(match_id="missing", format="array"), 404)

    created = _new_match({"game": "tictactoe", "seed": 3, "max_plies": 1})
    _expect_http_error(lambda: get_match(match_id=created["match_id"], ply=5), 400)
