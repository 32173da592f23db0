"""Game hub - one authoritative table per game id."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from unotable.config import RulesConfig
from unotable.engine import (
    Intent,
    Outcome,
    TableSnapshot,
    TableState,
    advance,
    init_game,
    submit,
)

if TYPE_CHECKING:
    from unotable.agent.protocol import AgentProtocol

logger = logging.getLogger(__name__)

MAX_AUTO_STEPS = 500


class UnknownGameError(LookupError):
    """No game is registered under the given id."""


@dataclass
class GameSession:
    game_id: str
    state: TableState
    agents: Dict[int, "AgentProtocol"] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class GameHub:
    """Holds every active game and serializes intents per game.

    Intents for the same game are queued on that game's lock and never
    interleave. With auto_advance, computer seats play right after each
    accepted intent until a human must act, a human's UNO window is open,
    or the game ends.
    """

    def __init__(self, auto_advance: bool = True) -> None:
        self._auto_advance = auto_advance
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    # Session lifecycle -------------------------------------------------

    def create_game(
        self,
        rules: Optional[RulesConfig] = None,
        seed: Optional[int] = None,
        agents: Optional[Dict[int, "AgentProtocol"]] = None,
    ) -> str:
        return self.add_game(init_game(rules, seed=seed), agents)

    def add_game(
        self,
        state: TableState,
        agents: Optional[Dict[int, "AgentProtocol"]] = None,
    ) -> str:
        """Register an existing table and return its new game id."""
        game_id = uuid.uuid4().hex
        session = GameSession(game_id=game_id, state=state, agents=dict(agents or {}))
        with self._lock:
            self._sessions[game_id] = session
        logger.info("Created game %s", game_id)
        return game_id

    def close_game(self, game_id: str) -> None:
        with self._lock:
            if self._sessions.pop(game_id, None) is None:
                raise UnknownGameError(game_id)
        logger.info("Closed game %s", game_id)

    def game_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    # Actions -----------------------------------------------------------

    def submit(self, game_id: str, intent: Intent) -> Outcome:
        session = self._session(game_id)
        with session.lock:
            outcome = submit(session.state, intent)
            if outcome.ok:
                session.state = outcome.state
                if self._auto_advance:
                    outcome = self._run_computers(session, outcome)
            return outcome

    def advance(self, game_id: str) -> Outcome:
        """Play one computer turn now (the caller owns any presentation delay)."""
        session = self._session(game_id)
        with session.lock:
            state = session.state
            outcome = advance(state, session.agents.get(state.acting_seat()))
            if outcome.ok:
                session.state = outcome.state
            return outcome

    # Views -------------------------------------------------------------

    def snapshot(self, game_id: str, viewer: Optional[int]) -> TableSnapshot:
        session = self._session(game_id)
        with session.lock:
            return TableSnapshot.from_state(session.state, viewer)

    def state(self, game_id: str) -> TableState:
        session = self._session(game_id)
        with session.lock:
            return session.state

    # Internals ---------------------------------------------------------

    def _session(self, game_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(game_id)
        if session is None:
            raise UnknownGameError(game_id)
        return session

    def _run_computers(self, session: GameSession, outcome: Outcome) -> Outcome:
        events = list(outcome.events)
        for _ in range(MAX_AUTO_STEPS):
            state = session.state
            if state.is_terminal or not state.is_computer(state.acting_seat()):
                break
            if any(state.vulnerable[seat] for seat in state.rules.human_seats):
                break
            step = advance(state, session.agents.get(state.acting_seat()))
            if not step.ok:
                logger.error("Computer turn failed in game %s: %s", session.game_id, step.events)
                break
            session.state = step.state
            events.extend(step.events)
        return Outcome(ok=True, state=session.state, events=events)
