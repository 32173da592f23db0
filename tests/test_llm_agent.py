"""Tests for the LLM agent with a stubbed client."""

from types import SimpleNamespace

import pytest

from unotable.agents import LLMAgent
from unotable.agents.llm_agent import DRAW, _parse_action_response
from unotable.config import RulesConfig
from unotable.engine import Color, TableSnapshot

OPTIONS = [0, 2, DRAW]


@pytest.mark.parametrize(
    "response,expected",
    [
        ('{"action_index": 1}', 2),
        ("Sure! {'action_index': 0}", 0),
        ('I pick "action_index": 2 because', DRAW),
        ("I will DRAW a card", DRAW),
        ("Option 1 looks best", 2),
        ('{"action_index": 7}', None),
        ("no idea", None),
    ],
)
def test_parse_action_response(response, expected):
    assert _parse_action_response(response, OPTIONS) == expected


class StubClient:
    """Mimics client.chat.completions.create."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _view(make_table, hand, top):
    state = make_table([hand, ["yellow_1", "yellow_2"]], top, rules=RulesConfig(human_seats=[]))
    return state.hands[0], TableSnapshot.from_state(state, 0)


def test_llm_agent_uses_reply(make_table):
    hand, view = _view(make_table, ["blue_3", "red_4", "red_5"], "red_9")
    client = StubClient(['{"action_index": 1}'])
    agent = LLMAgent(provider="ollama", model="llama3", client=client)
    assert agent.choose_action(hand, view, 0) == 2
    assert len(client.calls) == 1
    assert "PLAY red_5" in client.calls[0]["messages"][0]["content"]


def test_llm_agent_draw_reply(make_table):
    hand, view = _view(make_table, ["blue_3", "red_4"], "red_9")
    agent = LLMAgent(provider="ollama", model="llama3", client=StubClient(['{"action_index": 1}']))
    assert agent.choose_action(hand, view, 0) is None


def test_llm_agent_falls_back_after_failures(make_table):
    hand, view = _view(make_table, ["blue_3", "red_4", "red_8"], "red_9")
    client = StubClient([RuntimeError("down"), "gibberish", TimeoutError("slow")])
    agent = LLMAgent(provider="ollama", model="llama3", client=client)
    assert agent.choose_action(hand, view, 0) == 2
    assert len(client.calls) == 3


def test_llm_agent_skips_call_without_legal_play(make_table):
    hand, view = _view(make_table, ["blue_3"], "red_9")
    client = StubClient([])
    agent = LLMAgent(provider="ollama", model="llama3", client=client)
    assert agent.choose_action(hand, view, 0) is None
    assert client.calls == []


def test_llm_agent_color_and_call():
    agent = LLMAgent(provider="ollama", model="llama3", client=StubClient([]))
    assert agent.name == "llm-llama3"
    assert agent.choose_color([]) is Color.RED
    assert agent.declares_uno(None) is True


def test_unknown_provider():
    with pytest.raises(ValueError):
        LLMAgent(provider="carrier-pigeon", client=StubClient([]))


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    with pytest.raises(ValueError):
        LLMAgent(provider="groq")
