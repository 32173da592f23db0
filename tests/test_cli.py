"""Tests for the command line."""

from typer.testing import CliRunner

from unotable.cli import app

runner = CliRunner()


def test_tournament_command():
    result = runner.invoke(app, ["tournament", "--agents", "priority,random", "--games", "3", "--seed", "1"])
    assert result.exit_code == 0, result.output
    assert "Tournament results:" in result.output
    assert "player_0:priority" in result.output
    assert "player_1:random" in result.output


def test_tournament_needs_two_agents():
    result = runner.invoke(app, ["tournament", "--agents", "priority", "--games", "1"])
    assert result.exit_code != 0


def test_unknown_agent_type():
    result = runner.invoke(app, ["tournament", "--agents", "priority,sphinx", "--games", "1"])
    assert result.exit_code != 0


def test_play_command_with_scripted_input():
    # Seat 0 always draws (and passes if asked again) until the game ends
    result = runner.invoke(
        app,
        ["play", "--players", "2", "--seed", "3", "--no-stacking"],
        input="d\n" * 2000,
    )
    assert result.exit_code == 0, result.output
    assert "Turns:" in result.output
