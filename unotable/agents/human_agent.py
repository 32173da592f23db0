"""Human agent - reads decisions from the terminal."""

from typing import Optional, Sequence

from unotable.engine import SUIT_COLORS, Card, Color, TableSnapshot
from unotable.engine.rules import jump_in_indices, legal_play_indices


class HumanAgent:
    """Agent that prompts the human for input via terminal."""

    is_human = True

    def __init__(self, name: str = "human"):
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
        legal = legal_play_indices(hand, view)

        print("\n--- Your turn ---")
        print("Top discard:", view.top_discard, f"(color: {view.active_color.value})")
        if view.pending_draws:
            print(f"You must draw {view.pending_draws} unless you stack a draw card")
        counts = ", ".join(
            f"P{seat}: {count}"
            for seat, count in enumerate(view.num_cards_per_player)
            if seat != self_index
        )
        print("Other hands:", counts)
        print("\nYour hand:")
        for i, card in enumerate(hand):
            marker = "*" if i in legal else " "
            print(f" {marker}{i}: {card}")
        print("Enter a card number, or 'd' to draw" + (" / pass" if view.drawn_card_pending else ""))

        while True:
            try:
                raw = input("> ").strip().lower()
            except EOFError:
                return None
            if raw in ("d", "draw", "pass"):
                return None
            if raw.isdigit() and int(raw) in legal:
                return int(raw)
            print("Invalid. Try again.")

    def choose_jump_in(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        options = jump_in_indices(hand, view)
        if not options:
            return None
        card = hand[options[0]]
        try:
            raw = input(f"You hold {card}, same as the top card. Jump in? [y/N] ").strip().lower()
        except EOFError:
            return None
        return options[0] if raw in ("y", "yes") else None

    def choose_color(self, hand: Sequence[Card]) -> Color:
        names = "/".join(color.value for color in SUIT_COLORS)
        while True:
            try:
                raw = input(f"Choose a color ({names}): ").strip().lower()
            except EOFError:
                return SUIT_COLORS[0]
            for color in SUIT_COLORS:
                if raw in (color.value, color.value[0]):
                    return color
            print("Invalid. Try again.")

    def declares_uno(self, view: TableSnapshot) -> bool:
        try:
            raw = input("One card left! Call UNO? [y/N] ").strip().lower()
        except EOFError:
            return False
        return raw in ("y", "yes", "uno")
