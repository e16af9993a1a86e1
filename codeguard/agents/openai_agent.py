"""OpenAI review agent.

Env vars:
  - OPENAI_API_KEY  (required)
  - OPENAI_MODEL    (default: gpt-4o-mini)

gpt-5 family models take ``max_completion_tokens`` and no temperature;
gpt-4o family models take ``max_tokens``.
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


class OpenAIAgent(AgentClient):
    def __init__(
        self,
        model_id: str | None = None,
        fix_enabled: bool | None = None,
    ) -> None:
        self._model_id = model_id or settings.OPENAI_MODEL
        self._fix_enabled = settings.FIX_ENABLED if fix_enabled is None else fix_enabled
        self._is_gpt5 = self._model_id.startswith("gpt-5")

    def name(self) -> str:
        return "openai"

    def is_configured(self) -> bool:
        return bool(settings.OPENAI_API_KEY)

    def call_agent(self, message: str, agent_id: str) -> dict[str, Any]:
        if not self.is_configured():
            return failure_envelope("OPENAI_API_KEY not configured")

        try:
            import openai

            client = openai.OpenAI(api_key=settings.OPENAI_API_KEY)

            kwargs: dict = {
                "model": self._model_id,
                "messages": [
                    {"role": "system", "content": build_system_prompt(self._fix_enabled)},
                    {"role": "user", "content": message},
                ],
                "response_format": {"type": "json_object"},
            }
            if self._is_gpt5:
                kwargs["max_completion_tokens"] = 8192
            else:
                kwargs["temperature"] = 0.1
                kwargs["max_tokens"] = 8192

            logger.debug(
                "OpenAI call model=%s, prompt_len=%d",
                self._model_id,
                len(message),
                extra={"agent_id": agent_id},
            )

            response = client.chat.completions.create(**kwargs)
            content = response.choices[0].message.content or ""

        except Exception as e:
            logger.error("OpenAI API error [%s]: %s", self._model_id, e, extra={"agent_id": agent_id})
            return failure_envelope(str(e))

        return success_envelope(parse_json_reply(content), agent_id, model=response.model)
