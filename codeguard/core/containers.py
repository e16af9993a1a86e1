from __future__ import annotations

from codeguard.agents.anthropic_agent import AnthropicAgent
from codeguard.agents.openai_agent import OpenAIAgent
from codeguard.agents.registry import AgentRegistry
from codeguard.services.session_store import SessionStore


def build_agent_registry() -> AgentRegistry:
    """Register all available review agent backends.

    To add a backend:
    1. Create a class implementing ``AgentClient`` in ``codeguard/agents/``
    2. ``registry.register(MyAgent())`` here
    3. Add env vars to ``Settings``
    """
    registry = AgentRegistry()
    registry.register(OpenAIAgent())
    registry.register(AnthropicAgent())
    return registry


def build_session_store() -> SessionStore:
    return SessionStore()
