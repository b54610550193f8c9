"""Built-in player implementations."""

from .alphabeta import AlphaBetaPlayer
from .ensemble_player import EnsemblePlayer
from .heuristic import HeuristicPlayer
from .maxn import MaxNPlayer
from .minimax import MiniMaxPlayer
from .montecarlo import MonteCarloPlayer, SimulationResult
from .random_player import RandomPlayer
from .rulebased import RuleBasedPlayer
from .trace_player import TracePlayer
from .uct import SearchNode, UCTPlayer

__all__ = [
    "AlphaBetaPlayer",
    "EnsemblePlayer",
    "HeuristicPlayer",
    "MaxNPlayer",
    "MiniMaxPlayer",
    "MonteCarloPlayer",
    "RandomPlayer",
    "RuleBasedPlayer",
    "SearchNode",
    "SimulationResult",
    "TracePlayer",
    "UCTPlayer",
]
