"""LLM agent using OpenAI library with OpenRouter, Groq, Ollama or Hugging Face."""

import json
import logging
import os
import re
import time
from collections import deque
from typing import Any, Deque, Dict, List, NamedTuple, Optional, Sequence

from openai import OpenAI

from unotable.agents.priority_agent import choose_card
from unotable.engine import Card, Color, TableSnapshot
from unotable.engine.rules import jump_in_indices, legal_play_indices, majority_color

logger = logging.getLogger(__name__)

DRAW = "DRAW"
MAX_ATTEMPTS = 3


class Provider(NamedTuple):
    base_url: str
    key_env: Optional[str]  # None: no key needed
    url_env: Optional[str] = None


PROVIDERS: Dict[str, Provider] = {
    "openrouter": Provider("https://openrouter.ai/api/v1", "OPENROUTER_API_KEY"),
    "groq": Provider("https://api.groq.com/openai/v1", "GROQ_API_KEY"),
    "ollama": Provider("http://localhost:11434/v1", None, url_env="OLLAMA_BASE_URL"),
    "huggingface": Provider("https://router.huggingface.co/v1", "HUGGINGFACE_API_KEY"),
}


class RateLimiter:
    """Sliding one-minute window of request timestamps."""

    def __init__(self, per_minute: Optional[float]):
        self.per_minute = per_minute
        self._stamps: Deque[float] = deque()

    def wait(self, label: str = "") -> None:
        if not self.per_minute:
            return
        now = time.time()
        while self._stamps and now - self._stamps[0] >= 60.0:
            self._stamps.popleft()
        if len(self._stamps) >= self.per_minute:
            delay = 60.0 - (now - self._stamps[0])
            if delay > 0:
                logger.info("[%s] Rate limit reached, waiting %.2fs", label, delay)
                time.sleep(delay)
        self._stamps.append(time.time())


def _format_view(view: TableSnapshot, hand: Sequence[Card], self_index: int) -> str:
    """Render the seat's view as prompt text."""
    others = [
        f"  Player {seat}: {count} cards"
        for seat, count in enumerate(view.num_cards_per_player)
        if seat != self_index
    ]
    history = [f"- {event}" for event in view.history] or ["(nothing yet)"]
    sections = [
        ("Your hand", " ".join(str(c) for c in hand)),
        ("Top card on discard", str(view.top_discard) if view.top_discard else "None"),
        ("Current color to match", view.active_color.value.upper()),
        ("Other players' card counts", "\n".join(others)),
        ("Direction", "clockwise" if view.direction == 1 else "counter-clockwise"),
        ("Cards you must draw unless you stack a draw card", str(view.pending_draws)),
        ("Recent events", "\n".join(history)),
    ]
    return "\n\n".join(f"=== {title} ===\n{body}" for title, body in sections)


def _format_options(options: List[Any], hand: Sequence[Card]) -> str:
    """Numbered options: card indices, or DRAW."""
    return "\n".join(
        f"{i}: DRAW" if option == DRAW else f"{i}: PLAY {hand[option]}"
        for i, option in enumerate(options)
    )


def _pick(idx: int, options: List[Any]) -> Optional[Any]:
    if 0 <= idx < len(options):
        return options[idx]
    logger.debug("Index %d out of range (0-%d)", idx, len(options) - 1)
    return None


def _parse_action_response(response: str, options: List[Any]) -> Optional[Any]:
    """Map an LLM reply onto one of the options (a card index or DRAW)."""
    # A JSON object, strict first, then with single quotes swapped
    found = re.search(r"(\{.*?\})", response, re.DOTALL)
    if found:
        raw = found.group(1)
        for candidate in (raw, raw.replace("'", '"')):
            try:
                data = json.loads(candidate)
            except ValueError:
                continue
            if isinstance(data, dict) and isinstance(data.get("action_index"), int):
                picked = _pick(data["action_index"], options)
                if picked is not None:
                    return picked
            break

    # action_index: N with any quoting
    keyed = re.search(r'["\']?action_index["\']?\s*:\s*(\d+)', response, re.IGNORECASE)
    if keyed:
        picked = _pick(int(keyed.group(1)), options)
        if picked is not None:
            return picked

    if DRAW in response.upper() and DRAW in options:
        return DRAW

    # Any standalone number
    for token in re.sub(r"[{}\[\]\"'.,:]", " ", response).split():
        if token.isdigit():
            picked = _pick(int(token), options)
            if picked is not None:
                return picked

    return None


PROMPT = """You are playing UNO.
Objective: Win by playing all your cards. Match the top discard card by color (red, blue, green, yellow) or value (0-9, skip, reverse, draw_two). Wild cards can be played on anything.

{view}

=== Legal actions ===
{options}

INSTRUCTIONS:
Select the best action to win the game.
Respond with a JSON object containing the index of your chosen action.
Example: {{"action_index": 2}}
"""


class LLMAgent:
    """Agent that asks an LLM which card to play.

    Falls back to the priority heuristic when every attempt fails or
    returns something unparseable.
    """

    is_human = False

    def __init__(
        self,
        provider: str = "openrouter",
        model: str = "openai/gpt-4o-mini",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        rate_limit: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown provider: {provider}")
        spec = PROVIDERS[provider]
        base_url = os.environ.get(spec.url_env, spec.base_url) if spec.url_env else spec.base_url

        if client is None:
            key = api_key or (os.environ.get(spec.key_env) if spec.key_env else provider)
            if not key:
                raise ValueError(f"API key required for {provider}. Set {spec.key_env} or pass api_key.")
            client = OpenAI(api_key=key, base_url=base_url)

        self._client = client
        self._model = model
        self._provider = provider
        self._timeout = timeout
        self._limiter = RateLimiter(rate_limit)  # requests per minute

        logger.info(
            "[%s] provider=%s base_url=%s timeout=%ss rate_limit=%s rpm",
            self.name, provider, base_url, timeout, rate_limit or "None",
        )

    @property
    def name(self) -> str:
        return f"llm-{self._model}"

    def _request(self, prompt: str) -> str:
        self._limiter.wait(self.name)
        kwargs: Dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "timeout": self._timeout,
        }
        # JSON mode only where the provider is known to support it
        if self._provider == "groq" or any(m in self._model for m in ("gpt-4", "gpt-3.5")):
            kwargs["response_format"] = {"type": "json_object"}
        resp = self._client.chat.completions.create(**kwargs)
        return resp.choices[0].message.content or ""

    def choose_action(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        options: List[Any] = list(legal_play_indices(hand, view))
        if not options:
            return None
        options.append(DRAW)
        prompt = PROMPT.format(
            view=_format_view(view, hand, self_index),
            options=_format_options(options, hand),
        )

        for attempt in range(1, MAX_ATTEMPTS + 1):
            started = time.time()
            try:
                content = self._request(prompt)
            except Exception as e:
                logger.warning(
                    "[%s] Attempt %d failed after %.2fs: %s: %s",
                    self.name, attempt, time.time() - started, type(e).__name__, e,
                )
                continue
            logger.debug("[%s] Response in %.2fs", self.name, time.time() - started)
            choice = _parse_action_response(content, options)
            if choice is not None:
                return None if choice == DRAW else choice
            logger.warning("[%s] Could not parse action from response: %r", self.name, content)

        logger.warning("[%s] All retries failed, falling back to the priority heuristic", self.name)
        return choose_card(hand, view, self_index)

    def choose_jump_in(
        self,
        hand: Sequence[Card],
        view: TableSnapshot,
        self_index: int,
    ) -> Optional[int]:
        # Decided locally, the model is only asked on its own turn
        options = jump_in_indices(hand, view)
        return options[0] if options else None

    def choose_color(self, hand: Sequence[Card]) -> Color:
        return majority_color(hand)

    def declares_uno(self, view: TableSnapshot) -> bool:
        return True
