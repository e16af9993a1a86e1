from typing import Any

import pytest
from fastapi.testclient import TestClient

from codeguard.agents.base import AgentClient
from codeguard.agents.registry import AgentRegistry
from codeguard.api.session_routes import get_agent
from codeguard.main import app


class FakeAgent(AgentClient):
    """Agent double: returns a canned envelope (or raises) and records calls."""

    def __init__(
        self,
        envelope: Any = None,
        exc: Exception | None = None,
        backend: str = "fake",
        configured: bool = True,
    ):
        self.backend = backend
        self.configured = configured
        self.envelope = envelope if envelope is not None else {"success": True, "response": {"result": {}}}
        self.exc = exc
        self.calls: list[tuple[str, str]] = []

    def name(self) -> str:
        return self.backend

    def is_configured(self) -> bool:
        return self.configured

    def call_agent(self, message: str, agent_id: str) -> Any:
        self.calls.append((message, agent_id))
        if self.exc is not None:
            raise self.exc
        return self.envelope


@pytest.fixture
def make_agent():
    return FakeAgent


@pytest.fixture
def fake_agent():
    return FakeAgent()


@pytest.fixture
def client(fake_agent):
    app.dependency_overrides[get_agent] = lambda: fake_agent
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def review_payload() -> dict:
    """A well-formed agent review payload."""
    return {
        "overall_score": 64,
        "summary": "Two security issues and one style nit.",
        "language_detected": "Python",
        "security_issues": [
            {
                "title": "Use of eval",
                "severity": "High",
                "description": "eval() on user input.",
                "line_reference": "Line 3",
                "fix_suggestion": "ast.literal_eval(value)",
            },
            {
                "title": "Hardcoded password",
                "severity": "Critical",
                "description": "Password literal in source.",
                "line_reference": "Line 1",
                "fix_suggestion": "os.environ['DB_PASSWORD']",
            },
        ],
        "performance_issues": [],
        "style_issues": [
            {
                "title": "Missing docstring",
                "category": "formatting",
                "description": "Public function has no docstring.",
                "line_reference": "Line 5",
                "fix_suggestion": '"""Add two numbers."""',
            }
        ],
        "issue_counts": {
            "security_total": 2,
            "security_critical": 1,
            "security_high": 1,
            "security_medium": 0,
            "security_low": 0,
            "performance_total": 0,
            "performance_high": 0,
            "performance_medium": 0,
            "performance_low": 0,
            "style_total": 1,
        },
        "top_priorities": [
            {"rank": 1, "title": "Hardcoded password", "category": "security", "reason": "Leaks credentials."},
        ],
    }


@pytest.fixture
def registry_client(monkeypatch, fake_agent):
    """Client that resolves agents through a registry of fakes instead of an override."""
    registry = AgentRegistry()
    registry.register(fake_agent)
    registry.register(FakeAgent(backend="offline", configured=False))
    monkeypatch.setattr("codeguard.api.session_routes.agent_registry", registry)
    monkeypatch.setattr("codeguard.api.session_routes.settings.AGENT_PROVIDER", "fake")
    return TestClient(app)
