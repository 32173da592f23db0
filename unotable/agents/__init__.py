"""Built-in agents."""

from unotable.agents.human_agent import HumanAgent
from unotable.agents.llm_agent import LLMAgent
from unotable.agents.priority_agent import PriorityAgent
from unotable.agents.random_agent import RandomAgent

__all__ = ["HumanAgent", "LLMAgent", "PriorityAgent", "RandomAgent"]
