"""Abstract base for review agent backends.

Every backend implements ``call_agent()``: it takes the composed
instruction (task description plus the submitted code) and the agent
identifier, and returns an envelope::

    {"success": True, "response": {"result": {...review JSON...}}}
    {"success": False, "error": "human readable reason"}

The envelope is untrusted by its consumers. Backends report SDK and
configuration failures through ``success=False`` rather than raising;
the session still guards against a raising backend.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


_REVIEW_KEYS = """\
- overall_score: integer 0-100
- summary: string
- language_detected: string
- security_issues: list of {title, severity (Critical/High/Medium/Low), description, line_reference, fix_suggestion}
- performance_issues: list of {title, impact (High/Medium/Low), description, line_reference, fix_suggestion}
- style_issues: list of {title, category (naming/formatting/error-handling/types/imports/...), description, line_reference, fix_suggestion}
- issue_counts: {security_total, security_critical, security_high, security_medium, security_low, \
performance_total, performance_high, performance_medium, performance_low, style_total}
- top_priorities: list of {rank, title, category, reason}, most important first"""

_FIX_KEYS = """
- fixed_code: string, the complete corrected code
- fixed_score: integer 0-100, the score of fixed_code
- fix_changelog: list of {change_type (security/performance/style/other), title, description, before_snippet, after_snippet}"""


def build_system_prompt(fix_enabled: bool) -> str:
    keys = _REVIEW_KEYS + (_FIX_KEYS if fix_enabled else "")
    return (
        "You are a senior code reviewer focused on security, performance and style.\n"
        "Respond with a single JSON object and nothing else. Use exactly these keys:\n"
        f"{keys}\n"
        "Use empty lists when a category has no findings."
    )


_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_reply(text: str) -> Any:
    """Decode the model's JSON reply, tolerating a markdown fence.

    Returns the raw text when it is not valid JSON; the normalizer turns
    that into an empty review.
    """
    stripped = (text or "").strip()
    m = _FENCE_RE.match(stripped)
    if m:
        stripped = m.group(1)
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        logger.warning("Agent reply is not valid JSON (%d chars)", len(stripped))
        return stripped


def success_envelope(result: Any, agent_id: str, model: str = "") -> dict[str, Any]:
    return {
        "success": True,
        "response": {"result": result, "agent_id": agent_id, "model": model},
    }


def failure_envelope(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}


class AgentClient(ABC):
    """Interface every review agent backend must implement."""

    @abstractmethod
    def name(self) -> str:
        """Short identifier used for selection, e.g. ``"openai"``."""

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if the required API key / env vars are set."""

    @abstractmethod
    def call_agent(self, message: str, agent_id: str) -> dict[str, Any]:
        """Run one review and return the response envelope."""
