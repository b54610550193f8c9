"""FastAPI server exposing a local API to play matches between search players."""

from __future__ import annotations

import time
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from engine.factory import GAME_NAMES, PLAYER_TYPES, build_game
from engine.serialize import json_dumps
from server.schemas import CreateMatchRequest
from server.session import SessionStore

app = FastAPI(title="Search Arena Local API", version="0.1.0")
store = SessionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok"}


@app.get("/api/games")
def list_games() -> dict[str, Any]:
    """List bundled games with their roles, and the available player types."""
    return {
        "games": {name: list(build_game(name).roles()) for name in GAME_NAMES},
        "player_types": list(PLAYER_TYPES),
    }


def _time_based_seed() -> int:
    """Generate a positive time-derived seed when client does not provide one."""
    seed = int(time.time_ns() & 0x7FFFFFFF)
    return seed if seed != 0 else 1


@app.post("/api/match/new")
async def new_match(request: CreateMatchRequest) -> dict:
    """Create a match, play it to the end and return its final view."""
    seed = request.seed if request.seed is not None else _time_based_seed()
    try:
        session = store.create_match(
            game=request.game,
            seed=seed,
            config=request.config,
            players=request.players,
            max_plies=request.max_plies,
            decision_timeout_sec=request.decision_timeout_sec,
        )
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    await session.play()
    return session.view()


@app.get("/api/match/{match_id}")
def get_match(match_id: str, ply: int | None = Query(default=None, ge=0)) -> dict:
    """Get the match view, at the latest ply or an earlier one."""
    try:
        session = store.get(match_id)
        return session.view(ply=ply)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown match_id: {match_id}") from exc
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/api/match/{match_id}/events", response_model=None)
def get_events(match_id: str, format: str = Query(default="array")) -> Any:
    """Return full event history as array (default) or JSONL text."""
    try:
        events = store.all_events(match_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown match_id: {match_id}") from exc

    if format == "jsonl":
        text = "\n".join(json_dumps(event) for event in events)
        return PlainTextResponse(content=text, media_type="application/jsonl")
    return events


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.main:app", host="0.0.0.0", port=8000, reload=True)
