"""Command line entrypoint for running a batch of matches."""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Sequence

from .factory import GAME_NAMES, build_game, create_player, normalize_player_config, player_label
from .match import Match, MatchConfig
from .result import MatchResult
from .serialize import json_dumps


def summarize(results: Sequence[MatchResult]) -> dict[str, Any]:
    """Aggregate wins per role and termination reasons over many matches."""
    wins: Counter[str] = Counter()
    reasons: Counter[str] = Counter()
    draws = 0
    for result in results:
        reasons[result.termination_reason.value] += 1
        if result.winners:
            wins.update(result.winners)
        else:
            draws += 1
    total = len(results)
    return {
        "results": [result.to_dict() for result in results],
        "wins": dict(wins),
        "win_rates": {role: count / total for role, count in wins.items()} if total else {},
        "draws": draws,
        "termination_reasons": dict(reasons),
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Run matches of a bundled game between configured players."""
    parser = argparse.ArgumentParser(description="Run game matches between search players.")
    parser.add_argument("--game", default="tictactoe", choices=list(GAME_NAMES))
    parser.add_argument("--num-games", type=int, default=1)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--max-plies", type=int, default=None)
    parser.add_argument(
        "--players",
        type=str,
        default="random",
        help="Comma-separated player types in role order, e.g. 'minimax,uct'. One type applies to every role.",
    )
    parser.add_argument("--decision-timeout", type=float, default=None)
    parser.add_argument("--log-dir", type=str, default=None)
    parser.add_argument("--output", type=str, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    game = build_game(args.game)
    roles = list(game.roles())
    player_types = [part.strip() for part in args.players.split(",") if part.strip()]
    if len(player_types) == 1:
        player_types = player_types * len(roles)
    if len(player_types) != len(roles):
        parser.error(f"{args.game} needs {len(roles)} players, got {len(player_types)}.")
    configs = [normalize_player_config(player_type) for player_type in player_types]

    config = MatchConfig(
        max_plies=args.max_plies,
        decision_timeout_sec=args.decision_timeout,
        event_log_dir=args.log_dir,
    )
    results = []
    for offset in range(args.num_games):
        seed = args.seed + offset
        players = {
            role: create_player(player_config, role=role, seed=seed)
            for role, player_config in zip(roles, configs, strict=True)
        }
        match = Match(game, players, seed=seed, config=config)
        results.append(match.run_sync().summary())

    summary = summarize(results)
    summary["players"] = {role: player_label(player_config) for role, player_config in zip(roles, configs, strict=True)}
    print(json_dumps(summary, indent=2))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_dumps(summary, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
