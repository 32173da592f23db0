"""Game orchestration."""

from unotable.orchestration.game_runner import GameResult, GameRunner
from unotable.orchestration.hub import GameHub, UnknownGameError
from unotable.orchestration.tournament import run_tournament

__all__ = ["GameResult", "GameRunner", "GameHub", "UnknownGameError", "run_tournament"]
