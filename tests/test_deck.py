"""Unit tests for cards and the deck."""

import random
from collections import Counter

import pytest

from unotable.engine import (
    Card,
    Color,
    DeckInvariantError,
    ErrorKind,
    Rank,
    RuleViolation,
    SUIT_COLORS,
    create_deck,
    reshuffle_discard,
    validate_deck,
)
from unotable.engine.deck import verify_conservation

from conftest import cards


def test_create_deck_size() -> None:
    deck = create_deck(seed=42)
    assert len(deck) == 108


def test_create_deck_reproducible() -> None:
    d1 = create_deck(seed=123)
    d2 = create_deck(seed=123)
    assert [str(c) for c in d1] == [str(c) for c in d2]


def test_deck_categories() -> None:
    deck = create_deck(seed=1)
    assert sum(1 for c in deck if c.is_number) == 76
    assert sum(1 for c in deck if c.is_action) == 24
    assert sum(1 for c in deck if c.is_wild) == 8


def test_deck_counts_per_rank() -> None:
    counts = Counter(create_deck(seed=7))
    for color in SUIT_COLORS:
        assert counts[Card(color, Rank.ZERO)] == 1
        for rank in ("1", "5", "9", "skip", "reverse", "draw_two"):
            assert counts[Card(color, Rank(rank))] == 2
    assert counts[Card(Color.WILD, Rank.WILD)] == 4
    assert counts[Card(Color.WILD, Rank.WILD_DRAW_FOUR)] == 4


def test_validate_deck_rejects_missing_card() -> None:
    deck = create_deck(seed=3)
    deck.remove(Card(Color.RED, Rank.ZERO))
    deck.append(Card(Color.RED, Rank.ONE))
    with pytest.raises(DeckInvariantError):
        validate_deck(deck)


def test_card_validation() -> None:
    with pytest.raises(ValueError):
        Card(Color.WILD, Rank.SEVEN)
    with pytest.raises(ValueError):
        Card(Color.RED, Rank.WILD)
    assert str(Card(Color.BLUE, Rank.DRAW_TWO)) == "blue_draw_two"
    assert str(Card(Color.WILD, Rank.WILD_DRAW_FOUR)) == "wild_draw_four"


def test_card_wire_form() -> None:
    c = Card(Color.GREEN, Rank.REVERSE)
    assert c.to_dict() == {"color": "green", "rank": "reverse"}
    assert Card.from_dict(c.to_dict()) == c


def test_reshuffle_keeps_top_card() -> None:
    draw: list[Card] = []
    discard = cards("red_1", "red_2", "blue_2", "blue_skip")
    moved = reshuffle_discard(draw, discard, random.Random(0))
    assert moved == 3
    assert discard == cards("blue_skip")
    assert Counter(draw) == Counter(cards("red_1", "red_2", "blue_2"))


def test_reshuffle_impossible() -> None:
    discard = cards("red_1")
    with pytest.raises(RuleViolation) as exc:
        reshuffle_discard([], discard, random.Random(0))
    assert exc.value.kind is ErrorKind.EMPTY_DRAW_UNAVAILABLE
    assert discard == cards("red_1")


def test_verify_conservation() -> None:
    deck = create_deck(seed=5)
    verify_conservation(deck)
    with pytest.raises(DeckInvariantError):
        verify_conservation(deck + cards("red_5"))
    with pytest.raises(DeckInvariantError):
        verify_conservation(deck[1:])
