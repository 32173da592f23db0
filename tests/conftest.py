"""Shared helpers for building exact table scenarios."""

import random
from collections import Counter
from typing import Optional, Sequence

import pytest

from unotable.config import RulesConfig
from unotable.engine import Card, Color, Phase, Rank, TableState
from unotable.engine.deck import standard_counts


def card(name: str) -> Card:
    """Parse "red_7", "blue_draw_two", "wild", "wild_draw_four"."""
    if name in ("wild", "wild_draw_four"):
        return Card(Color.WILD, Rank(name))
    color, rank = name.split("_", 1)
    return Card(Color(color), Rank(rank))


def cards(*names: str) -> list[Card]:
    return [card(n) for n in names]


def build_table(
    hands: Sequence[Sequence[str]],
    top: str,
    *,
    rules: Optional[RulesConfig] = None,
    next_draws: Sequence[str] = (),
    current: int = 0,
    direction: int = 1,
    active_color: Optional[Color] = None,
    pending_draws: int = 0,
    leftovers: str = "draw",
    seed: int = 0,
) -> TableState:
    """Table with exact hands; every other card goes to the draw or discard pile.

    next_draws are drawn first, in the order given.
    """
    rules = rules or RulesConfig(player_count=len(hands))
    hand_cards = [cards(*h) for h in hands]
    top_card = card(top)
    upcoming = cards(*next_draws)

    used = Counter([top_card]) + Counter(upcoming)
    for h in hand_cards:
        used += Counter(h)
    available = standard_counts()
    for c, n in used.items():
        assert available[c] >= n, f"Deck has only {available[c]} x {c}"
    rest = list((available - used).elements())

    draw_pile = list(reversed(upcoming))
    discard_pile = [top_card]
    if leftovers == "draw":
        draw_pile = rest + draw_pile
    else:
        discard_pile = rest + discard_pile

    return TableState(
        rules=rules,
        hands=hand_cards,
        draw_pile=draw_pile,
        discard_pile=discard_pile,
        current_player=current,
        direction=direction,
        active_color=active_color or top_card.color,
        pending_draws=pending_draws,
        phase=Phase.AWAITING_MOVE,
        vulnerable=[False] * len(hands),
        rng=random.Random(seed),
    )


@pytest.fixture
def make_table():
    return build_table
