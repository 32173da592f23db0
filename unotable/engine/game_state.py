"""Table state for UNO."""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from unotable.config import RulesConfig
from unotable.engine.card import Card, Color


class Phase(str, Enum):
    """Turn phases of the table."""

    AWAITING_MOVE = "awaiting_move"
    AWAITING_COLOR_CHOICE = "awaiting_color_choice"
    AWAITING_SPECIAL_CALL_WINDOW = "awaiting_special_call_window"
    TERMINAL = "terminal"


@dataclass
class TableState:
    """Full, authoritative UNO table.

    The engine never mutates a state it was handed: it works on clone() and
    returns the copy, so a rejected intent leaves the caller's state intact.
    """

    rules: RulesConfig
    hands: List[List[Card]]  # seat -> cards
    draw_pile: List[Card]  # next draw is last
    discard_pile: List[Card]  # top is last
    current_player: int
    direction: int  # 1 = clockwise, -1 = counter-clockwise
    active_color: Color  # color to match, set by the chooser when a wild is on top
    pending_draws: int = 0  # accumulated Draw Two/Four owed by the current player
    phase: Phase = Phase.AWAITING_MOVE
    vulnerable: List[bool] = field(default_factory=list)  # one card left, UNO not called
    color_chooser: Optional[int] = None
    drawn_card_pending: bool = False  # current human drew a playable card
    winner: Optional[int] = None
    history: List[str] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @property
    def player_count(self) -> int:
        return len(self.hands)

    @property
    def is_terminal(self) -> bool:
        return self.phase is Phase.TERMINAL

    def top_discard(self) -> Optional[Card]:
        """Return the top card on the discard pile."""
        return self.discard_pile[-1] if self.discard_pile else None

    def is_computer(self, seat: int) -> bool:
        return self.rules.is_computer(seat)

    def acting_seat(self) -> int:
        """Seat whose input the table is waiting for."""
        if self.phase is Phase.AWAITING_COLOR_CHOICE and self.color_chooser is not None:
            return self.color_chooser
        return self.current_player

    def all_cards(self) -> Iterator[Card]:
        yield from self.draw_pile
        yield from self.discard_pile
        for hand in self.hands:
            yield from hand

    def clone(self) -> "TableState":
        rng = random.Random()
        rng.setstate(self.rng.getstate())
        return TableState(
            rules=self.rules,
            hands=[list(hand) for hand in self.hands],
            draw_pile=list(self.draw_pile),
            discard_pile=list(self.discard_pile),
            current_player=self.current_player,
            direction=self.direction,
            active_color=self.active_color,
            pending_draws=self.pending_draws,
            phase=self.phase,
            vulnerable=list(self.vulnerable),
            color_chooser=self.color_chooser,
            drawn_card_pending=self.drawn_card_pending,
            winner=self.winner,
            history=list(self.history),
            rng=rng,
        )


@dataclass
class TableSnapshot:
    """Filtered table visible to a single seat.

    Contains only that seat's hand; other hands are reduced to counts.
    A viewer of None is a spectator and sees no hand at all.
    """

    viewer: Optional[int]
    my_hand: List[Card]
    top_discard: Optional[Card]
    active_color: Color
    current_player: int
    direction: int
    pending_draws: int
    phase: Phase
    num_cards_per_player: List[int]
    vulnerable: List[bool]
    draw_pile_size: int
    drawn_card_pending: bool
    jump_in_enabled: bool
    draw_stacking_enabled: bool
    winner: Optional[int]
    history: List[str]  # Recent game events

    @property
    def player_count(self) -> int:
        return len(self.num_cards_per_player)

    @property
    def is_terminal(self) -> bool:
        return self.phase is Phase.TERMINAL

    @classmethod
    def from_state(cls, state: TableState, viewer: Optional[int]) -> "TableSnapshot":
        """Create a seat view from the full table, hiding other seats' hands."""
        own = state.hands[viewer] if viewer is not None else []
        return cls(
            viewer=viewer,
            my_hand=list(own),
            top_discard=state.top_discard(),
            active_color=state.active_color,
            current_player=state.current_player,
            direction=state.direction,
            pending_draws=state.pending_draws,
            phase=state.phase,
            num_cards_per_player=[len(hand) for hand in state.hands],
            vulnerable=list(state.vulnerable),
            draw_pile_size=len(state.draw_pile),
            drawn_card_pending=state.drawn_card_pending and viewer == state.current_player,
            jump_in_enabled=state.rules.jump_in_enabled,
            draw_stacking_enabled=state.rules.draw_stacking_enabled,
            winner=state.winner,
            history=list(state.history[-10:]),  # Last 10 events
        )

    def to_dict(self) -> dict:
        """JSON-safe form for broadcasting."""
        return {
            "viewer": self.viewer,
            "my_hand": [card.to_dict() for card in self.my_hand],
            "top_discard": self.top_discard.to_dict() if self.top_discard else None,
            "active_color": self.active_color.value,
            "current_player": self.current_player,
            "direction": self.direction,
            "pending_draws": self.pending_draws,
            "phase": self.phase.value,
            "num_cards_per_player": list(self.num_cards_per_player),
            "vulnerable": list(self.vulnerable),
            "draw_pile_size": self.draw_pile_size,
            "drawn_card_pending": self.drawn_card_pending,
            "jump_in_enabled": self.jump_in_enabled,
            "draw_stacking_enabled": self.draw_stacking_enabled,
            "terminal": self.is_terminal,
            "winner": self.winner,
            "history": list(self.history),
        }
