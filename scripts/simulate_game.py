"""Simulate a game between computer agents and print every event."""

from unotable.agents import PriorityAgent, RandomAgent
from unotable.config import RulesConfig
from unotable.orchestration.game_runner import GameRunner


def main():
    agents = {
        0: PriorityAgent("Bot0"),
        1: RandomAgent("Bot1", seed=1),
        2: PriorityAgent("Bot2"),
        3: RandomAgent("Bot3", seed=3),
    }
    rules = RulesConfig(player_count=4, human_seats=[], jump_in_enabled=True)

    def show(events: list[str]) -> None:
        for event in events:
            print(f"> {event}")

    runner = GameRunner(agents, rules=rules, seed=42, on_events=show)
    result = runner.run()

    print(f"Game finished! Winner: {result.winner}")
    print(f"Turns: {result.num_turns}")


if __name__ == "__main__":
    main()
