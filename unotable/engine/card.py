"""Card, Color and Rank types for UNO."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Color(str, Enum):
    """Card colors. WILD is the printed color of wild-family cards."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    WILD = "wild"


# Fixed order, also used to break ties when picking a color.
SUIT_COLORS = (Color.RED, Color.GREEN, Color.BLUE, Color.YELLOW)


class Rank(str, Enum):
    """Card ranks."""

    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    SKIP = "skip"
    REVERSE = "reverse"
    DRAW_TWO = "draw_two"
    WILD = "wild"
    WILD_DRAW_FOUR = "wild_draw_four"


NUMBER_RANKS = tuple(r for r in Rank if r.value.isdigit())
ACTION_RANKS = (Rank.SKIP, Rank.REVERSE, Rank.DRAW_TWO)
WILD_RANKS = (Rank.WILD, Rank.WILD_DRAW_FOUR)


@dataclass(frozen=True)
class Card:
    """A UNO card.

    For number/action cards: color is one of the four suit colors.
    For wild cards: color is Color.WILD, rank is Rank.WILD or Rank.WILD_DRAW_FOUR.
    The color chosen when a wild is played lives on the table, never on the card.
    """

    color: Color
    rank: Rank

    def __post_init__(self) -> None:
        if not isinstance(self.color, Color) or not isinstance(self.rank, Rank):
            raise ValueError(f"Invalid card: {self.color!r} {self.rank!r}")
        if self.rank in WILD_RANKS and self.color is not Color.WILD:
            raise ValueError("Wild cards must have color=Color.WILD")
        if self.rank not in WILD_RANKS and self.color is Color.WILD:
            raise ValueError("Non-wild cards must have a suit color")

    @property
    def is_wild(self) -> bool:
        return self.rank in WILD_RANKS

    @property
    def is_number(self) -> bool:
        return self.rank in NUMBER_RANKS

    @property
    def is_action(self) -> bool:
        return self.rank in ACTION_RANKS

    @property
    def is_draw_card(self) -> bool:
        """DrawTwo and WildDrawFour, the cards that feed the pending draw."""
        return self.rank in (Rank.DRAW_TWO, Rank.WILD_DRAW_FOUR)

    @property
    def number(self) -> Optional[int]:
        return int(self.rank.value) if self.is_number else None

    def to_dict(self) -> dict:
        return {"color": self.color.value, "rank": self.rank.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        return cls(color=Color(data["color"]), rank=Rank(data["rank"]))

    def __str__(self) -> str:
        if self.is_wild:
            return self.rank.value
        return f"{self.color.value}_{self.rank.value}"
