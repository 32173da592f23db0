"""Random computer player, handy for simulations and tournaments."""

import random
from typing import Optional, Sequence

from unotable.engine import SUIT_COLORS, Card, Color, TableSnapshot
from unotable.engine.rules import jump_in_indices, legal_play_indices


class RandomAgent:
    """Plays a random legal card; draws only when nothing is playable."""

    is_human = False

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        self._name = name
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return self._name

    def choose_action(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        # Prefer playing over drawing to make game progress
        legal = legal_play_indices(hand, view)
        if not legal:
            return None
        return self._rng.choice(legal)

    def choose_jump_in(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        options = jump_in_indices(hand, view)
        if not options or self._rng.random() < 0.5:
            return None
        return self._rng.choice(options)

    def choose_color(self, hand: Sequence[Card]) -> Color:
        return self._rng.choice(SUIT_COLORS)

    def declares_uno(self, view: TableSnapshot) -> bool:
        return True
