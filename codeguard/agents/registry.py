"""Review agent registry.

Usage::

    registry = AgentRegistry()
    registry.register(OpenAIAgent())
    registry.register(AnthropicAgent())

    agent = registry.get("openai")       # specific backend or None
    agent = registry.pick("anthropic")   # raises if missing / unconfigured
    names = registry.list()              # ["openai", "anthropic"]
    ready = registry.list_configured()   # only those with API keys set
    agent = registry.get_default("openai")  # preferred, else first configured
"""

from __future__ import annotations

from codeguard.agents.base import AgentClient


class AgentRegistry:
    """Registry of available review agent backends."""

    def __init__(self) -> None:
        self._agents: dict[str, AgentClient] = {}

    def register(self, agent: AgentClient) -> None:
        self._agents[agent.name()] = agent

    def get(self, name: str) -> AgentClient | None:
        return self._agents.get(name)

    def pick(self, name: str) -> AgentClient:
        a = self.get(name)
        if a is None:
            available = ", ".join(self.list())
            raise ValueError(f"Unknown agent backend '{name}'. Available: {available}")
        if not a.is_configured():
            raise ValueError(f"Agent backend '{name}' is not configured. Set the required API key in your .env file.")
        return a

    def list(self) -> list[str]:
        """All registered backend names."""
        return list(self._agents.keys())

    def list_configured(self) -> list[str]:
        """Only backends whose API keys are set."""
        return [n for n, a in self._agents.items() if a.is_configured()]

    def get_default(self, preferred: str | None = None) -> AgentClient | None:
        """Return *preferred* when it is registered, else the first configured backend.

        A registered but unconfigured *preferred* backend is still returned so
        its "not configured" failure surfaces to the user as an error message.
        """
        if preferred and preferred in self._agents:
            return self._agents[preferred]
        for a in self._agents.values():
            if a.is_configured():
                return a
        return None
