"""Engine exports for games, players, chance and matches."""

from .aleatory import D4, D6, D8, D10, D12, D20, D100, Distribution, dice_sum_probability
from .contingent import ContingentState, is_contingent
from .errors import (
    EngineError,
    IllegalActionError,
    IncompatiblePlayerError,
    InvariantViolation,
    MatchConfigurationError,
    PlayerExecutionError,
    PlayerTimeoutError,
)
from .events import EventType, MatchEvent
from .game import Game
from .match import HistoryEntry, Match, MatchConfig
from .player import QUIT, Player
from .randomness import Randomness
from .result import MatchResult, TerminationReason
from .state import GameState

__all__ = [
    "ContingentState",
    "D4",
    "D6",
    "D8",
    "D10",
    "D12",
    "D20",
    "D100",
    "Distribution",
    "EngineError",
    "EventType",
    "Game",
    "GameState",
    "HistoryEntry",
    "IllegalActionError",
    "IncompatiblePlayerError",
    "InvariantViolation",
    "Match",
    "MatchConfig",
    "MatchConfigurationError",
    "MatchEvent",
    "MatchResult",
    "Player",
    "PlayerExecutionError",
    "PlayerTimeoutError",
    "QUIT",
    "Randomness",
    "TerminationReason",
    "dice_sum_probability",
    "is_contingent",
]
