"""CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from dotenv import load_dotenv

from unotable.config import Config, RulesConfig, load_config
from unotable.logger import setup_logging

if TYPE_CHECKING:
    from unotable.agent.protocol import AgentProtocol

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="UNO against computer and LLM opponents")


def _make_agent(spec: str, config: Config, seed: Optional[int] = None) -> "AgentProtocol":
    from unotable.agents import LLMAgent, PriorityAgent, RandomAgent

    spec = spec.strip()
    if ":" in spec:
        kind, model = spec.split(":", 1)
    else:
        kind, model = spec, config.llm.model
    kind = kind.lower()

    agent: AgentProtocol
    if kind == "priority":
        agent = PriorityAgent()
    elif kind == "random":
        agent = RandomAgent(seed=seed)
    elif kind == "llm":
        agent = LLMAgent(
            provider=config.llm.provider,
            model=model,
            timeout=config.llm.timeout,
            rate_limit=config.llm.rate_limit,
        )
    else:
        raise typer.BadParameter(f"Unknown agent type: {kind}. Use 'priority', 'random' or 'llm'.")
    return agent


def _rules(
    config: Config,
    players: int,
    human_seats: list[int],
    jump_in: Optional[bool],
    stacking: Optional[bool],
) -> RulesConfig:
    """Config rules with the command-line overrides applied."""
    data = config.rules.model_dump()
    data.update(player_count=players, human_seats=human_seats)
    if jump_in is not None:
        data["jump_in_enabled"] = jump_in
    if stacking is not None:
        data["draw_stacking_enabled"] = stacking
    return RulesConfig.model_validate(data)


def _setup(config_path: Optional[Path], log_level: Optional[str]) -> Config:
    config = load_config(config_path)
    setup_logging(log_level or config.logging.level)
    return config


@app.command()
def play(
    players: int = typer.Option(2, "--players", "-n", min=2, max=4, help="Number of seats"),
    opponent: str = typer.Option(
        "priority",
        "--opponent",
        "-o",
        help="Computer seats: priority, random, or llm[:model_name]",
    ),
    jump_in: Optional[bool] = typer.Option(None, "--jump-in/--no-jump-in", help="Allow jump-ins"),
    stacking: Optional[bool] = typer.Option(
        None, "--stacking/--no-stacking", help="Let draw cards stack"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", envvar="UNOTABLE_CONFIG", help="YAML config file"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
) -> None:
    """Play one game from seat 0 against computer seats."""
    from unotable.agents import HumanAgent
    from unotable.orchestration.game_runner import GameRunner

    config = _setup(config_path, log_level)
    rules = _rules(config, players, [0], jump_in, stacking)

    agents = {0: HumanAgent(name="you")}
    for seat in range(1, players):
        agents[seat] = _make_agent(opponent, config, seed=None if seed is None else seed + seat)

    def show(events: list[str]) -> None:
        for event in events:
            typer.echo(f"> {event}")

    runner = GameRunner(agents, rules=rules, seed=seed, on_events=show)
    result = runner.run()
    if result.winner == 0:
        typer.echo("You win!")
    elif result.winner is not None:
        typer.echo(f"Player {result.winner} ({agents[result.winner].name}) wins.")
    else:
        typer.echo("No winner.")
    typer.echo(f"Turns: {result.num_turns}")


@app.command()
def tournament(
    agents: str = typer.Option(
        "priority,random",
        "--agents",
        "-a",
        help="Comma-separated: priority, random, or llm:model_name (2 to 4 agents)",
    ),
    games: int = typer.Option(100, "--games", "-g", help="Number of games"),
    jump_in: Optional[bool] = typer.Option(None, "--jump-in/--no-jump-in", help="Allow jump-ins"),
    stacking: Optional[bool] = typer.Option(
        None, "--stacking/--no-stacking", help="Let draw cards stack"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", envvar="UNOTABLE_CONFIG", help="YAML config file"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
) -> None:
    """Run a tournament between computer agents."""
    from unotable.orchestration.tournament import run_tournament

    config = _setup(config_path, log_level)
    specs = [s for s in agents.split(",") if s.strip()]
    if not 2 <= len(specs) <= 4:
        raise typer.BadParameter("Give 2 to 4 agents")
    agent_map = {
        f"player_{i}:{spec.strip()}": _make_agent(spec, config, seed=None if seed is None else seed + i)
        for i, spec in enumerate(specs)
    }
    rules = _rules(config, len(specs), [], jump_in, stacking)

    wins = run_tournament(agent_map, num_games=games, seed=seed, rules=rules)
    typer.echo("Tournament results:")
    for label in sorted(agent_map, key=lambda x: -wins.get(x, 0)):
        typer.echo(f"  {label}: {wins.get(label, 0)} wins")


if __name__ == "__main__":
    app()
