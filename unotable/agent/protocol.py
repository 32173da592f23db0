"""Agent protocol - interface that computer, LLM and human players implement."""

from typing import Optional, Protocol, Sequence

from unotable.engine import Card, Color, TableSnapshot


class AgentProtocol(Protocol):
    """Interface for UNO-playing agents."""

    is_human: bool

    @property
    def name(self) -> str:
        """Display name for the agent."""
        ...

    def choose_action(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        """Choose a card to play given the hand and the table.

        Args:
            hand: This agent's cards, in hand order.
            view: Filtered table with only this seat's hand and public info.
            self_index: This agent's seat.

        Returns:
            Index into hand of the card to play, or None to draw.
        """
        ...

    def choose_jump_in(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        """Offered when another seat is on turn and jump-ins are enabled.

        Returns:
            Index of an exact-match card to jump in with, or None to pass.
        """
        ...

    def choose_color(self, hand: Sequence[Card]) -> Color:
        """Name a suit color after playing a wild (hand excludes the wild)."""
        ...

    def declares_uno(self, view: TableSnapshot) -> bool:
        """Whether to call UNO now that the hand is down to one card."""
        ...
