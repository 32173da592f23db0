"""Deck creation, shuffling and card bookkeeping."""

import random
from collections import Counter
from typing import Iterable, List, Optional

from unotable.engine.card import (
    ACTION_RANKS,
    NUMBER_RANKS,
    SUIT_COLORS,
    WILD_RANKS,
    Card,
    Color,
    Rank,
)
from unotable.engine.errors import DeckInvariantError, ErrorKind, RuleViolation

DECK_SIZE = 108
NUMBER_CARD_TOTAL = 76
ACTION_CARD_TOTAL = 24
WILD_CARD_TOTAL = 8


def _build_cards() -> List[Card]:
    cards: List[Card] = []

    for color in SUIT_COLORS:
        # One zero per color
        cards.append(Card(color=color, rank=Rank.ZERO))
        # Two of each 1-9 and action cards per color
        for rank in NUMBER_RANKS[1:] + ACTION_RANKS:
            cards.append(Card(color=color, rank=rank))
            cards.append(Card(color=color, rank=rank))

    for _ in range(4):
        cards.append(Card(color=Color.WILD, rank=Rank.WILD))
        cards.append(Card(color=Color.WILD, rank=Rank.WILD_DRAW_FOUR))

    return cards


def standard_counts() -> Counter:
    """Multiset of the full 108-card deck."""
    return Counter(_build_cards())


def validate_deck(cards: Iterable[Card]) -> None:
    """Check the composition of a full deck.

    Raises:
        DeckInvariantError: if any per-rank count or category total is off.
    """
    cards = list(cards)
    numbers = sum(1 for c in cards if c.is_number)
    actions = sum(1 for c in cards if c.is_action)
    wilds = sum(1 for c in cards if c.is_wild)
    if (len(cards), numbers, actions, wilds) != (
        DECK_SIZE, NUMBER_CARD_TOTAL, ACTION_CARD_TOTAL, WILD_CARD_TOTAL
    ):
        raise DeckInvariantError(
            f"Bad deck: {len(cards)} cards ({numbers} number, {actions} action, {wilds} wild)"
        )
    counts = Counter(cards)
    for color in SUIT_COLORS:
        for rank in NUMBER_RANKS + ACTION_RANKS:
            expected = 1 if rank is Rank.ZERO else 2
            if counts[Card(color, rank)] != expected:
                raise DeckInvariantError(f"Expected {expected} x {color.value}_{rank.value}")
    for rank in WILD_RANKS:
        if counts[Card(Color.WILD, rank)] != 4:
            raise DeckInvariantError(f"Expected 4 x {rank.value}")


def create_deck(
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """Create a shuffled standard 108-card UNO deck.

    - 4 colors x (one 0, two each of 1-9): 76 cards
    - 4 colors x two each of Skip, Reverse, Draw Two: 24 cards
    - 4 Wild, 4 Wild Draw Four: 8 cards
    """
    cards = _build_cards()
    validate_deck(cards)

    if rng is None:
        rng = random.Random(seed)
    rng.shuffle(cards)
    return cards


def reshuffle_discard(
    draw_pile: List[Card],
    discard_pile: List[Card],
    rng: random.Random,
) -> int:
    """Move every discard except the top card into the draw pile and shuffle.

    Both lists are modified in place. Returns how many cards were moved.

    Raises:
        RuleViolation: EMPTY_DRAW_UNAVAILABLE if the discard pile holds one card or none.
    """
    if len(discard_pile) <= 1:
        raise RuleViolation(
            ErrorKind.EMPTY_DRAW_UNAVAILABLE,
            "Draw pile is empty and there is nothing to reshuffle",
        )
    top = discard_pile[-1]
    moved = discard_pile[:-1]
    rng.shuffle(moved)
    draw_pile.extend(moved)
    discard_pile[:] = [top]
    return len(moved)


def verify_conservation(cards: Iterable[Card]) -> None:
    """Assert that ``cards`` is exactly the full deck.

    Raises:
        DeckInvariantError: if any card was created or destroyed.
    """
    counts = Counter(cards)
    if counts != standard_counts():
        total = sum(counts.values())
        raise DeckInvariantError(f"Card conservation broken: {total} cards on the table")
