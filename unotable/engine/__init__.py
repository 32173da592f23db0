"""Rules engine for UNO."""

from unotable.engine.card import SUIT_COLORS, Card, Color, Rank
from unotable.engine.deck import create_deck, reshuffle_discard, validate_deck
from unotable.engine.errors import DeckInvariantError, ErrorKind, RuleViolation
from unotable.engine.game_state import Phase, TableSnapshot, TableState
from unotable.engine.rules import (
    ChooseColor,
    DeclareUno,
    DrawCard,
    Intent,
    Outcome,
    PlayCard,
    advance,
    can_play,
    get_legal_intents,
    init_game,
    legal_play_indices,
    majority_color,
    next_seat,
    parse_intent,
    submit,
)

__all__ = [
    "SUIT_COLORS",
    "Card",
    "Color",
    "Rank",
    "create_deck",
    "reshuffle_discard",
    "validate_deck",
    "DeckInvariantError",
    "ErrorKind",
    "RuleViolation",
    "Phase",
    "TableSnapshot",
    "TableState",
    "ChooseColor",
    "DeclareUno",
    "DrawCard",
    "Intent",
    "Outcome",
    "PlayCard",
    "advance",
    "can_play",
    "get_legal_intents",
    "init_game",
    "legal_play_indices",
    "majority_color",
    "next_seat",
    "parse_intent",
    "submit",
]
