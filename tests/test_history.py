"""Unit tests for game history logging."""

from unotable.config import RulesConfig
from unotable.engine import (
    DrawCard,
    PlayCard,
    TableSnapshot,
    get_legal_intents,
    init_game,
    parse_intent,
    submit,
)

import pytest


def test_history_initialization():
    state = init_game()
    assert len(state.history) == 1
    assert state.history[0].startswith("Game started")


def test_history_records_play(make_table):
    state = make_table([["red_3", "blue_1"], ["green_1"]], "red_9")
    outcome = submit(state, PlayCard(0, 0))
    assert outcome.state.history[-len(outcome.events):] == outcome.events
    assert "Player 0 played red_3" in outcome.state.history


def test_history_persists_across_turns(make_table):
    state = make_table(
        [["red_3", "blue_1"], ["green_1", "green_2"]],
        "red_9",
        rules=RulesConfig(player_count=2, human_seats=[0, 1]),
        next_draws=["yellow_5"],
    )
    state = submit(state, PlayCard(0, 0)).state
    state = submit(state, DrawCard(1)).state
    assert "Player 0 played red_3" in state.history
    assert state.history[-1] == "Player 1 drew a card"


def test_rejected_intent_leaves_history_alone(make_table):
    state = make_table([["blue_3", "blue_1"], ["green_1"]], "red_9")
    outcome = submit(state, PlayCard(0, 0))
    assert not outcome.ok
    assert outcome.state.history == state.history
    assert outcome.events and "does not match" in outcome.events[0]


def test_snapshot_hides_other_hands():
    state = init_game(RulesConfig(player_count=3), seed=2)
    view = TableSnapshot.from_state(state, 1)
    assert view.my_hand == state.hands[1]
    assert view.num_cards_per_player == [7, 7, 7]
    data = view.to_dict()
    assert data["top_discard"] == state.top_discard().to_dict()
    assert data["terminal"] is False
    assert len(data["my_hand"]) == 7
    assert TableSnapshot.from_state(state, None).my_hand == []


def test_legal_intents_match_engine(make_table):
    state = make_table([["red_3", "blue_1", "wild"], ["green_1"]], "red_9")
    intents = get_legal_intents(state, 0)
    assert intents == [PlayCard(0, 0), PlayCard(0, 2), DrawCard(0)]
    for intent in intents:
        assert submit(state, intent).ok


def test_parse_intent():
    assert parse_intent({"kind": "play_card", "player": 1, "payload": {"card_index": 2}}) == PlayCard(1, 2)
    assert parse_intent({"kind": "draw_card", "player": 0}) == DrawCard(0)
    with pytest.raises(ValueError):
        parse_intent({"kind": "shout", "player": 0})
    with pytest.raises(ValueError):
        parse_intent({"kind": "play_card", "player": 0})


@pytest.mark.parametrize(
    "data",
    [
        {"kind": "play_card", "player": 0, "payload": {"card_index": None}},
        {"kind": "play_card", "player": 0, "payload": {"card_index": "2"}},
        {"kind": "play_card", "player": 0, "payload": [1]},
        {"kind": "draw_card", "player": 0, "payload": "oops"},
        {"kind": "draw_card", "player": True},
        ["draw_card", 0],
    ],
)
def test_parse_intent_rejects_malformed_payloads(data):
    with pytest.raises(ValueError):
        parse_intent(data)


def test_snapshot_dict_carries_precheck_flags(make_table):
    rules = RulesConfig(player_count=2, jump_in_enabled=True, draw_stacking_enabled=False)
    state = make_table([["blue_3", "green_4"], ["green_1"]], "red_9", rules=rules, next_draws=["red_2"])
    state = submit(state, DrawCard(0)).state
    data = TableSnapshot.from_state(state, 0).to_dict()
    assert data["drawn_card_pending"] is True
    assert data["jump_in_enabled"] is True
    assert data["draw_stacking_enabled"] is False
    assert TableSnapshot.from_state(state, 1).to_dict()["drawn_card_pending"] is False
