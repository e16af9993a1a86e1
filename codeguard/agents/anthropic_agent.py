"""Anthropic Claude review agent.

Uses the ``anthropic`` Python SDK.  Reads configuration from env vars:
  - ANTHROPIC_API_KEY   (required)
  - ANTHROPIC_MODEL     (default: claude-3-5-haiku-20241022)
"""

from __future__ import annotations

import logging
from typing import Any

from codeguard.core.config import settings
from codeguard.agents.base import (
    AgentClient,
    build_system_prompt,
    failure_envelope,
    parse_json_reply,
    success_envelope,
)

logger = logging.getLogger(__name__)


class AnthropicAgent(AgentClient):
    """Claude 3.5 Haiku (or any Anthropic chat model)."""

    def __init__(self, model_id: str | None = None, fix_enabled: bool | None = None) -> None:
        self._model_id = model_id or settings.ANTHROPIC_MODEL
        self._fix_enabled = settings.FIX_ENABLED if fix_enabled is None else fix_enabled

    def name(self) -> str:
        return "anthropic"

    def is_configured(self) -> bool:
        return bool(settings.ANTHROPIC_API_KEY)

    def call_agent(self, message: str, agent_id: str) -> dict[str, Any]:
        if not self.is_configured():
            return failure_envelope("ANTHROPIC_API_KEY not configured")

        try:
            import anthropic

            client = anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
            response = client.messages.create(
                model=self._model_id,
                max_tokens=8192,
                system=build_system_prompt(self._fix_enabled),
                messages=[
                    {"role": "user", "content": message},
                ],
                temperature=0.2,
            )

            content = ""
            for block in response.content:
                if block.type == "text":
                    content += block.text

        except Exception as e:
            logger.error("Anthropic API error: %s", e, extra={"agent_id": agent_id})
            return failure_envelope(str(e))

        return success_envelope(parse_json_reply(content), agent_id, model=response.model)
