from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from codeguard.api import session_routes
from codeguard.core.config import settings
from codeguard.core.logging import setup_logging

__version__ = "0.1.0"

setup_logging()

tags_metadata = [
    {
        "name": "session",
        "description": "Create a review session, edit code, submit it to the review agent "
        "and read back the normalized findings. Also toggles the built-in sample review.",
    },
    {
        "name": "health",
        "description": "Liveness probe.",
    },
]

app = FastAPI(
    title="CodeGuard Code Review",
    version=__version__,
    description="Security, performance and style review of source code by an AI agent.",
    openapi_tags=tags_metadata,
)

app.include_router(session_routes.router)


@app.get("/health", tags=["health"], summary="Health check")
def health() -> dict[str, Any]:
    return {
        "status": "healthy",
        "version": __version__,
        "agent_provider": settings.AGENT_PROVIDER,
        "agents_configured": session_routes.agent_registry.list_configured(),
    }
