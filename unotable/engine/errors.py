"""Error kinds reported by the rules engine."""

from enum import Enum


class ErrorKind(str, Enum):
    """Why an intent was rejected."""

    NOT_YOUR_TURN = "not_your_turn"
    INVALID_CARD = "invalid_card"
    INVALID_CALL = "invalid_call"
    ALREADY_WON = "already_won"
    EMPTY_DRAW_UNAVAILABLE = "empty_draw_unavailable"
    INVALID_COLOR_CHOICE = "invalid_color_choice"
    GAME_ALREADY_OVER = "game_already_over"


class RuleViolation(Exception):
    """An intent broke a rule. The table state it was applied to is discarded."""

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind


class DeckInvariantError(AssertionError):
    """Cards were created or lost. This is a bug, never a player error."""
