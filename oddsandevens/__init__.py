"""Odds and Evens package exports."""

from .oddsandevens_game import OddsAndEvensGame
from .oddsandevens_state import ROLE_EVENS, ROLE_ODDS, OddsAndEvensState

__all__ = ["OddsAndEvensGame", "OddsAndEvensState", "ROLE_EVENS", "ROLE_ODDS"]
