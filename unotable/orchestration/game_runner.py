"""Single game runner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from unotable.config import RulesConfig
from unotable.engine import (
    ChooseColor,
    DeclareUno,
    DrawCard,
    Outcome,
    Phase,
    PlayCard,
    TableSnapshot,
    TableState,
    advance,
    init_game,
    next_seat,
    submit,
)
from unotable.engine.rules import jump_in_indices

if TYPE_CHECKING:
    from unotable.agent.protocol import AgentProtocol

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Result of a completed game."""

    winner: Optional[int]
    num_turns: int
    player_count: int
    history: tuple[str, ...]


class GameRunner:
    """Runs a single UNO game to completion.

    agents maps each seat to its agent; seats whose agent is human go through
    submit(), computer seats through advance(). With jump-ins enabled, seats
    off turn are offered their exact matches after every step.
    """

    def __init__(
        self,
        agents: dict[int, "AgentProtocol"],
        rules: Optional[RulesConfig] = None,
        seed: Optional[int] = None,
        max_turns: int = 1000,
        on_events: Optional[Callable[[list[str]], None]] = None,
    ):
        base = rules or RulesConfig(player_count=len(agents))
        if sorted(agents) != list(range(base.player_count)):
            raise ValueError(f"Need one agent per seat 0..{base.player_count - 1}")
        human_seats = [seat for seat, agent in agents.items() if agent.is_human]
        self._rules = base.model_copy(update={"human_seats": human_seats})
        self._agents = agents
        self._seed = seed
        self._max_turns = max_turns
        self._on_events = on_events
        self.state: Optional[TableState] = None

    def _apply(self, outcome: Outcome) -> bool:
        if self._on_events and outcome.events:
            self._on_events(outcome.events)
        if outcome.ok:
            self.state = outcome.state
        return outcome.ok

    def _human_turn(self, state: TableState, seat: int) -> None:
        agent = self._agents[seat]
        hand = state.hands[seat]
        if state.phase is Phase.AWAITING_COLOR_CHOICE:
            intent = ChooseColor(seat, agent.choose_color(list(hand)))
        else:
            view = TableSnapshot.from_state(state, seat)
            choice = agent.choose_action(list(hand), view, seat)
            intent = DrawCard(seat) if choice is None else PlayCard(seat, choice)
        if self._apply(submit(state, intent)):
            self._offer_uno_call(seat)

    def _offer_uno_call(self, seat: int) -> None:
        state = self.state
        if state is None or not state.vulnerable[seat]:
            return
        if self._agents[seat].declares_uno(TableSnapshot.from_state(state, seat)):
            self._apply(submit(state, DeclareUno(seat)))

    def _offer_jump_ins(self) -> None:
        """Ask off-turn seats holding an exact match, nearest seat first."""
        if not self._rules.jump_in_enabled:
            return
        jumped = True
        while jumped and not self.state.is_terminal:
            jumped = False
            state = self.state
            n = state.player_count
            for skip in range(n - 1):
                seat = next_seat(state.current_player, state.direction, skip, n)
                hand = state.hands[seat]
                view = TableSnapshot.from_state(state, seat)
                if not jump_in_indices(hand, view):
                    continue
                agent = self._agents[seat]
                index = agent.choose_jump_in(list(hand), view, seat)
                if index is None:
                    continue
                if self._apply(submit(state, PlayCard(seat, index))):
                    if agent.is_human:
                        self._offer_uno_call(seat)
                    jumped = True
                    break

    def run(self) -> GameResult:
        """Run the game and return the result."""
        self.state = init_game(self._rules, seed=self._seed)
        if self._on_events:
            self._on_events(list(self.state.history))
        num_turns = 0

        while not self.state.is_terminal and num_turns < self._max_turns:
            state = self.state
            seat = state.acting_seat()
            agent = self._agents[seat]
            if agent.is_human:
                self._human_turn(state, seat)
            elif not self._apply(advance(state, agent)):
                logger.error("Computer seat %d could not move, stopping", seat)
                break
            self._offer_jump_ins()
            num_turns += 1

        if not self.state.is_terminal:
            logger.warning("Stopped after %d turns without a winner", num_turns)

        return GameResult(
            winner=self.state.winner,
            num_turns=num_turns,
            player_count=self.state.player_count,
            history=tuple(self.state.history),
        )
