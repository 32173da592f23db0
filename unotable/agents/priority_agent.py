"""Reference computer opponent: a fixed priority list over legal cards."""

from typing import Callable, List, Optional, Sequence

from unotable.engine import Card, Color, Rank, TableSnapshot
from unotable.engine.rules import jump_in_indices, legal_play_indices, majority_color, next_seat

# Block a nearly-finished next seat with these, strongest first
BLOCKING_ORDER = (Rank.WILD_DRAW_FOUR, Rank.DRAW_TWO, Rank.SKIP)
ATTACK_RANKS = (Rank.SKIP, Rank.DRAW_TWO)
HIGH_NUMBER = 5
THREAT_HAND_SIZE = 2


def _first_of_rank(hand: Sequence[Card], legal: List[int], rank: Rank) -> Optional[int]:
    return next((i for i in legal if hand[i].rank is rank), None)


def _highest_number(
    hand: Sequence[Card],
    legal: List[int],
    keep: Callable[[int], bool] = lambda n: True,
) -> Optional[int]:
    numbers = [i for i in legal if hand[i].is_number and keep(hand[i].number)]
    if not numbers:
        return None
    # max() returns the first index among equal ranks
    return max(numbers, key=lambda i: hand[i].number)


def choose_card(hand: Sequence[Card], view: TableSnapshot, self_index: int) -> Optional[int]:
    """Pick a card index, or None to draw.

    1. Next seat holds <= 2 cards: Wild Draw Four, then Draw Two, then Skip.
    2. Reverse, then Skip or Draw Two.
    3. Highest number card of 5 or more.
    4. Highest number card.
    5. Plain Wild.
    6. Any other wild.
    7. Draw.
    """
    legal = legal_play_indices(hand, view)
    if not legal:
        return None

    following = next_seat(self_index, view.direction, 0, view.player_count)
    if view.num_cards_per_player[following] <= THREAT_HAND_SIZE:
        for rank in BLOCKING_ORDER:
            index = _first_of_rank(hand, legal, rank)
            if index is not None:
                return index

    index = _first_of_rank(hand, legal, Rank.REVERSE)
    if index is not None:
        return index
    index = next((i for i in legal if hand[i].rank in ATTACK_RANKS), None)
    if index is not None:
        return index

    index = _highest_number(hand, legal, lambda n: n >= HIGH_NUMBER)
    if index is not None:
        return index
    index = _highest_number(hand, legal)
    if index is not None:
        return index

    index = _first_of_rank(hand, legal, Rank.WILD)
    if index is not None:
        return index
    return next((i for i in legal if hand[i].is_wild), None)


class PriorityAgent:
    """Deterministic computer player."""

    is_human = False

    def __init__(self, name: str = "priority"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def choose_action(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        return choose_card(hand, view, self_index)

    def choose_jump_in(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        # Jump in whenever an exact match is held
        options = jump_in_indices(hand, view)
        return options[0] if options else None

    def choose_color(self, hand: Sequence[Card]) -> Color:
        return majority_color(hand)

    def declares_uno(self, view: TableSnapshot) -> bool:
        return True
