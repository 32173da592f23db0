"""Agent interface."""

from unotable.agent.protocol import AgentProtocol

__all__ = ["AgentProtocol"]
