"""JSON log lines for review sessions.

Every record is written to stdout as one JSON object. Session events carry
their ``session_id`` and submission ``epoch``, so a submission, its agent
response and any discarded stale response can be matched up by filtering
on those two keys:

    {"ts": "...", "level": "INFO", "logger": "codeguard.services.review_session",
     "msg": "Submitting 42 chars of Python for review", "session_id": "…", "epoch": 1}
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

# Session context that callers pass through extra={}
_CONTEXT_FIELDS = ("session_id", "epoch", "agent_id")

_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "openai", "anthropic")


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON line, keeping only the session context that was set."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name)) for name in _CONTEXT_FIELDS if hasattr(record, name)
        )

        # Agent call failures are logged with the transport traceback
        if record.exc_info and record.exc_info[0] is not None:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging() -> None:
    """Send all records to stdout as JSON at ``LOG_LEVEL`` (default ``INFO``).

    Agent SDK and HTTP client loggers are held at WARNING so request chatter
    does not bury the session events.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    # Replace handlers installed by uvicorn or an earlier call
    root.handlers.clear()
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
