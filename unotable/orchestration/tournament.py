"""Tournament - run many games and aggregate results."""

import random
from collections import defaultdict
from typing import Any, Optional

from unotable.config import RulesConfig
from unotable.orchestration.game_runner import GameRunner


def run_tournament(
    agents: dict[str, Any],
    num_games: int = 100,
    seed: int | None = None,
    rules: Optional[RulesConfig] = None,
) -> dict[str, int]:
    """Run a tournament between computer agents.

    Seats rotate every game so nobody keeps the first move. Games that hit
    the turn cap count for nobody.

    Returns:
        Dict mapping agent label to number of wins.
    """
    labels = list(agents.keys())
    if not 2 <= len(labels) <= 4:
        raise ValueError("A tournament needs 2 to 4 agents")
    rules = rules or RulesConfig(player_count=len(labels))
    wins: dict[str, int] = defaultdict(int)

    rng = random.Random(seed)
    for g in range(num_games):
        shift = g % len(labels)
        order = labels[shift:] + labels[:shift]
        seats = {seat: agents[label] for seat, label in enumerate(order)}
        runner = GameRunner(seats, rules=rules, seed=rng.randint(0, 2**31 - 1))
        result = runner.run()
        if result.winner is not None:
            wins[order[result.winner]] += 1

    return dict(wins)
