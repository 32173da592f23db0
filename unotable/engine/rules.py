"""UNO rules: intents, legality and state transitions."""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Union

from unotable.config import RulesConfig
from unotable.engine.card import SUIT_COLORS, Card, Color, Rank
from unotable.engine.deck import create_deck, reshuffle_discard, verify_conservation
from unotable.engine.errors import ErrorKind, RuleViolation
from unotable.engine.game_state import Phase, TableSnapshot, TableState

if TYPE_CHECKING:
    from unotable.agent.protocol import AgentProtocol

logger = logging.getLogger(__name__)

ColorPolicy = Callable[[Sequence[Card]], Color]


@dataclass(frozen=True)
class PlayCard:
    """Intent: play the card at card_index of the player's hand."""

    player: int
    card_index: int


@dataclass(frozen=True)
class DrawCard:
    """Intent: draw owed cards, or take a free draw."""

    player: int


@dataclass(frozen=True)
class ChooseColor:
    """Intent: name the active color after playing a wild."""

    player: int
    color: Union[Color, str]


@dataclass(frozen=True)
class DeclareUno:
    """Intent: call UNO while holding exactly one card."""

    player: int


Intent = Union[PlayCard, DrawCard, ChooseColor, DeclareUno]


@dataclass
class Outcome:
    """Result of an intent: the new table (or the untouched one) plus events."""

    ok: bool
    state: TableState
    events: List[str] = field(default_factory=list)
    error: Optional[ErrorKind] = None

    def view(self, viewer: Optional[int]) -> TableSnapshot:
        return TableSnapshot.from_state(self.state, viewer)


def next_seat(current: int, direction: int, skip_count: int, player_count: int) -> int:
    """Seat that acts after ``current``, passing over ``skip_count`` seats."""
    return (current + direction * (skip_count + 1)) % player_count


def can_play(
    card: Card,
    top: Optional[Card],
    active_color: Color,
    pending_draws: int = 0,
    stacking: bool = False,
) -> bool:
    """Check if a card can be played on the current discard pile."""
    # Owed draws can only be passed on with another draw card
    if pending_draws > 0 and not (stacking and card.is_draw_card):
        return False
    if card.is_wild:
        return True
    if card.color == active_color:
        return True
    return top is not None and card.rank == top.rank


def is_exact_match(card: Card, top: Optional[Card]) -> bool:
    """Jump-in test: same color and rank as the top card. Never true for wilds."""
    return top is not None and not card.is_wild and card == top


def legal_play_indices(hand: Sequence[Card], view: TableSnapshot) -> List[int]:
    """Indices of cards the viewing seat may play on its own turn."""
    if view.is_terminal or view.phase is Phase.AWAITING_COLOR_CHOICE:
        return []
    candidates = range(len(hand))
    if view.drawn_card_pending:
        candidates = [len(hand) - 1]
    return [
        i
        for i in candidates
        if can_play(
            hand[i],
            view.top_discard,
            view.active_color,
            view.pending_draws,
            view.draw_stacking_enabled,
        )
    ]


def jump_in_indices(hand: Sequence[Card], view: TableSnapshot) -> List[int]:
    """Indices of cards the viewing seat may jump in with out of turn."""
    if not view.jump_in_enabled or view.is_terminal:
        return []
    if view.phase is Phase.AWAITING_COLOR_CHOICE or view.viewer == view.current_player:
        return []
    return [
        i
        for i, card in enumerate(hand)
        if is_exact_match(card, view.top_discard)
        and can_play(
            card,
            view.top_discard,
            view.active_color,
            view.pending_draws,
            view.draw_stacking_enabled,
        )
    ]


def majority_color(hand: Sequence[Card]) -> Color:
    """Most-held suit color in the hand, ties by fixed color order, RED if none."""
    counts = Counter(card.color for card in hand if not card.is_wild)
    best, best_count = Color.RED, 0
    for color in SUIT_COLORS:
        if counts[color] > best_count:
            best, best_count = color, counts[color]
    return best


def get_legal_intents(state: TableState, player: int) -> List[Intent]:
    """Return every intent the engine would accept from this seat right now."""
    if state.is_terminal:
        return []
    view = TableSnapshot.from_state(state, player)
    hand = state.hands[player]
    intents: List[Intent] = []
    if state.phase is Phase.AWAITING_COLOR_CHOICE:
        if state.color_chooser == player:
            intents.extend(ChooseColor(player, color) for color in SUIT_COLORS)
    elif player == state.current_player:
        intents.extend(PlayCard(player, i) for i in legal_play_indices(hand, view))
        intents.append(DrawCard(player))
    else:
        intents.extend(PlayCard(player, i) for i in jump_in_indices(hand, view))
    if len(hand) == 1:
        intents.append(DeclareUno(player))
    return intents


def init_game(
    rules: Optional[RulesConfig] = None,
    seed: Optional[int] = None,
) -> TableState:
    """Create initial table: shuffle, deal, flip a number card onto the discard."""
    rules = rules or RulesConfig()
    rng = random.Random(seed)
    deck = create_deck(rng=rng)
    hands: List[List[Card]] = [[] for _ in range(rules.player_count)]
    for _ in range(rules.hand_size):
        for seat in range(rules.player_count):
            hands[seat].append(deck.pop())

    # First card must be a number card; anything else goes to the bottom
    first_card = deck.pop()
    while not first_card.is_number:
        deck.insert(0, first_card)
        first_card = deck.pop()

    state = TableState(
        rules=rules,
        hands=hands,
        draw_pile=deck,
        discard_pile=[first_card],
        current_player=0,
        direction=1,
        active_color=first_card.color,
        vulnerable=[False] * rules.player_count,
        history=[f"Game started: {first_card} is the first card"],
        rng=rng,
    )
    verify_conservation(state.all_cards())
    logger.info("New %d-player game, first card %s", rules.player_count, first_card)
    return state


def submit(
    state: TableState,
    intent: Intent,
    color_policy: Optional[ColorPolicy] = None,
) -> Outcome:
    """Validate and apply one intent.

    The given state is never modified. On success the Outcome carries a new
    state; on failure it carries the original state and the error kind.
    color_policy picks the color for computer seats that play a wild while
    resolving this intent; it defaults to majority_color.
    """
    policy = color_policy or majority_color
    return _transact(state, lambda table: _apply_intent(table, intent, policy))


def advance(state: TableState, agent: Optional["AgentProtocol"] = None) -> Outcome:
    """Play one turn for the computer seat the table is waiting on."""
    if agent is None:
        from unotable.agents.priority_agent import PriorityAgent

        agent = PriorityAgent()
    return _transact(state, lambda table: _computer_turn(table, agent))


def parse_intent(data: dict) -> Intent:
    """Build an intent from its wire form ``{kind, player, payload}``.

    Raises:
        ValueError: if the kind is unknown or a field is missing.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Intent must be an object, got {type(data).__name__}")
    kind = data.get("kind")
    player = data.get("player")
    payload = data.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValueError(f"Intent payload must be an object, got {type(payload).__name__}")
    if not isinstance(player, int) or isinstance(player, bool):
        raise ValueError(f"Intent needs an integer player, got {player!r}")
    if kind == "play_card":
        index = payload.get("card_index")
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValueError(f"play_card needs an integer payload.card_index, got {index!r}")
        return PlayCard(player=player, card_index=index)
    if kind == "draw_card":
        return DrawCard(player=player)
    if kind == "choose_color":
        if "color" not in payload:
            raise ValueError("choose_color needs payload.color")
        return ChooseColor(player=player, color=payload["color"])
    if kind == "declare_uno":
        return DeclareUno(player=player)
    raise ValueError(f"Unknown intent kind: {kind!r}")


# Transitions -----------------------------------------------------------


def _transact(state: TableState, step: Callable[[TableState], None]) -> Outcome:
    table = state.clone()
    before = len(table.history)
    try:
        step(table)
    except RuleViolation as exc:
        logger.debug("Rejected (%s): %s", exc.kind.value, exc)
        return Outcome(ok=False, state=state, events=[str(exc)], error=exc.kind)
    _settle(table)
    verify_conservation(table.all_cards())
    events = table.history[before:]
    logger.debug("Accepted: %s", "; ".join(events))
    return Outcome(ok=True, state=table, events=events)


def _apply_intent(table: TableState, intent: Intent, color_policy: ColorPolicy) -> None:
    seat = intent.player
    if not 0 <= seat < table.player_count:
        raise RuleViolation(ErrorKind.NOT_YOUR_TURN, f"No seat {seat} at this table")
    if table.is_terminal:
        if isinstance(intent, DeclareUno) and seat == table.winner:
            raise RuleViolation(ErrorKind.ALREADY_WON, f"Player {seat} already won")
        raise RuleViolation(
            ErrorKind.GAME_ALREADY_OVER, f"Game is over, Player {table.winner} won"
        )

    if isinstance(intent, DeclareUno):
        _declare_uno(table, seat)
        return

    if isinstance(intent, ChooseColor):
        _close_uno_window(table, seat)
        _choose_color(table, seat, intent.color)
        return

    if table.phase is Phase.AWAITING_COLOR_CHOICE:
        raise RuleViolation(
            ErrorKind.NOT_YOUR_TURN,
            f"Waiting for Player {table.color_chooser} to choose a color",
        )

    if isinstance(intent, PlayCard):
        _close_uno_window(table, seat)
        _play_card(table, seat, intent.card_index, color_policy)
    elif isinstance(intent, DrawCard):
        _close_uno_window(table, seat)
        _draw(table, seat, color_policy)
    else:
        raise TypeError(f"Unknown intent: {intent!r}")


def _computer_turn(table: TableState, agent: "AgentProtocol") -> None:
    if table.is_terminal:
        raise RuleViolation(
            ErrorKind.GAME_ALREADY_OVER, f"Game is over, Player {table.winner} won"
        )
    seat = table.acting_seat()
    if not table.is_computer(seat):
        raise RuleViolation(ErrorKind.NOT_YOUR_TURN, f"Player {seat} is not a computer seat")

    _close_uno_window(table, seat)
    hand = table.hands[seat]
    if table.phase is Phase.AWAITING_COLOR_CHOICE:
        _choose_color(table, seat, agent.choose_color(list(hand)))
        return

    view = TableSnapshot.from_state(table, seat)
    choice = agent.choose_action(list(hand), view, seat)
    if choice is not None and choice not in legal_play_indices(hand, view):
        logger.warning("%s picked unplayable index %r, drawing instead", agent.name, choice)
        choice = None
    if choice is None:
        _draw(table, seat, agent.choose_color)
    else:
        _play_card(table, seat, choice, agent.choose_color)


def _playable(table: TableState, card: Card) -> bool:
    return can_play(
        card,
        table.top_discard(),
        table.active_color,
        table.pending_draws,
        table.rules.draw_stacking_enabled,
    )


def _play_card(
    table: TableState,
    seat: int,
    index: int,
    color_policy: ColorPolicy,
) -> None:
    hand = table.hands[seat]
    if not 0 <= index < len(hand):
        raise RuleViolation(ErrorKind.INVALID_CARD, f"Player {seat} has no card at index {index}")
    card = hand[index]
    top = table.top_discard()

    jump_in = False
    if seat != table.current_player:
        if not (
            table.rules.jump_in_enabled
            and is_exact_match(card, top)
            and _playable(table, card)
        ):
            raise RuleViolation(
                ErrorKind.NOT_YOUR_TURN, f"It is Player {table.current_player}'s turn"
            )
        jump_in = True
    elif table.drawn_card_pending and index != len(hand) - 1:
        raise RuleViolation(ErrorKind.INVALID_CARD, "Only the card just drawn may be played")
    elif not _playable(table, card):
        if table.pending_draws > 0:
            message = f"Player {seat} must draw {table.pending_draws} first"
        else:
            message = f"{card} does not match {table.active_color.value} or {top}"
        raise RuleViolation(ErrorKind.INVALID_CARD, message)

    hand.pop(index)
    table.discard_pile.append(card)
    table.drawn_card_pending = False
    if jump_in:
        table.current_player = seat
        table.history.append(f"Player {seat} jumped in with {card}")
    else:
        table.history.append(f"Player {seat} played {card}")

    if not hand:
        table.phase = Phase.TERMINAL
        table.winner = seat
        table.color_chooser = None
        table.vulnerable = [False] * table.player_count
        table.history.append(f"Player {seat} WON!")
        logger.info("Player %d won", seat)
        return

    if len(hand) == 1:
        if table.is_computer(seat):
            table.history.append(f"Player {seat} called UNO!")
        else:
            table.vulnerable[seat] = True

    if card.is_wild:
        table.phase = Phase.AWAITING_COLOR_CHOICE
        table.color_chooser = seat
        if table.is_computer(seat):
            _choose_color(table, seat, color_policy(list(hand)))
        return

    table.active_color = card.color
    _resolve_effect(table, seat, card)


def _choose_color(table: TableState, seat: int, color: Union[Color, str]) -> None:
    if table.phase is not Phase.AWAITING_COLOR_CHOICE:
        raise RuleViolation(ErrorKind.INVALID_COLOR_CHOICE, "No wild card is waiting for a color")
    if seat != table.color_chooser:
        raise RuleViolation(
            ErrorKind.INVALID_COLOR_CHOICE,
            f"Only Player {table.color_chooser} may choose the color",
        )
    try:
        chosen = Color(color)
    except ValueError:
        chosen = None
    if chosen not in SUIT_COLORS:
        raise RuleViolation(ErrorKind.INVALID_COLOR_CHOICE, f"{color!r} is not a playable color")

    table.active_color = chosen
    table.color_chooser = None
    table.phase = Phase.AWAITING_MOVE
    table.history.append(f"Player {seat} chose {chosen.value}")
    _resolve_effect(table, seat, table.discard_pile[-1])


def _resolve_effect(table: TableState, seat: int, card: Card) -> None:
    n = table.player_count
    skip = 0
    if card.rank is Rank.SKIP:
        skip = 1
        table.history.append(f"Player {next_seat(seat, table.direction, 0, n)} is skipped")
    elif card.rank is Rank.REVERSE:
        table.direction = -table.direction
        # Two players: reversing hands the turn straight back
        if n == 2:
            skip = 1
        table.history.append("Direction reversed")
    elif card.is_draw_card:
        table.pending_draws += 2 if card.rank is Rank.DRAW_TWO else 4
        victim = next_seat(seat, table.direction, 0, n)
        table.history.append(f"Player {victim} must draw {table.pending_draws}")

    table.current_player = next_seat(seat, table.direction, skip, n)
    table.phase = Phase.AWAITING_MOVE


def _draw(table: TableState, seat: int, color_policy: ColorPolicy) -> None:
    if seat != table.current_player:
        raise RuleViolation(ErrorKind.NOT_YOUR_TURN, f"It is Player {table.current_player}'s turn")

    if table.pending_draws > 0:
        owed = table.pending_draws
        table.pending_draws = 0
        drawn = _deal(table, seat, owed)
        table.history.append(f"Player {seat} drew {drawn} cards (penalty)")
        _pass_turn(table, seat)
        return

    if table.drawn_card_pending:
        table.drawn_card_pending = False
        table.history.append(f"Player {seat} kept the drawn card")
        _pass_turn(table, seat)
        return

    if table.is_computer(seat):
        _draw_until_playable(table, seat, color_policy)
        return

    card = _draw_one(table)
    if card is None:
        table.history.append(f"Player {seat} could not draw")
        _pass_turn(table, seat)
        return
    table.hands[seat].append(card)
    table.history.append(f"Player {seat} drew a card")
    if _playable(table, card):
        table.drawn_card_pending = True
    else:
        _pass_turn(table, seat)


def _draw_until_playable(table: TableState, seat: int, color_policy: ColorPolicy) -> None:
    hand = table.hands[seat]
    drawn = 0
    while True:
        card = _draw_one(table)
        if card is None:
            table.history.append(f"Player {seat} drew {drawn} cards and found no play")
            _pass_turn(table, seat)
            return
        hand.append(card)
        drawn += 1
        if _playable(table, card):
            break
    table.history.append(f"Player {seat} drew {drawn} card{'' if drawn == 1 else 's'}")
    _play_card(table, seat, len(hand) - 1, color_policy)


def _draw_one(table: TableState) -> Optional[Card]:
    if not table.draw_pile:
        try:
            moved = reshuffle_discard(table.draw_pile, table.discard_pile, table.rng)
        except RuleViolation as exc:
            logger.warning("%s", exc)
            return None
        table.history.append(f"Draw pile ran out, {moved} discards shuffled into a new draw pile")
    return table.draw_pile.pop()


def _deal(table: TableState, seat: int, count: int) -> int:
    drawn = 0
    for _ in range(count):
        card = _draw_one(table)
        if card is None:
            break
        table.hands[seat].append(card)
        drawn += 1
    return drawn


def _pass_turn(table: TableState, seat: int) -> None:
    table.current_player = next_seat(seat, table.direction, 0, table.player_count)


def _declare_uno(table: TableState, seat: int) -> None:
    count = len(table.hands[seat])
    if count != 1:
        raise RuleViolation(
            ErrorKind.INVALID_CALL, f"Player {seat} has {count} cards, too early to call UNO"
        )
    table.vulnerable[seat] = False
    table.history.append(f"Player {seat} called UNO!")


def _close_uno_window(table: TableState, seat: int) -> None:
    """Penalize every other seat that let its UNO window lapse."""
    for other, flagged in enumerate(table.vulnerable):
        if flagged and other != seat:
            table.vulnerable[other] = False
            drawn = _deal(table, other, table.rules.uno_penalty)
            table.history.append(
                f"Player {other} did not call UNO and drew {drawn} penalty cards"
            )


def _settle(table: TableState) -> None:
    if table.is_terminal:
        return
    for seat, hand in enumerate(table.hands):
        if len(hand) != 1:
            table.vulnerable[seat] = False
    if table.color_chooser is not None:
        table.phase = Phase.AWAITING_COLOR_CHOICE
    elif any(table.vulnerable):
        table.phase = Phase.AWAITING_SPECIAL_CALL_WINDOW
    else:
        table.phase = Phase.AWAITING_MOVE
