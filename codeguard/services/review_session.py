"""Review session state machine.

One session holds the code being reviewed, the selected language and
exactly one of five states:

    EDITING ──submit──▶ SUBMITTING ──▶ RESULT | ERROR
       ▲                                   │
       └──────────── new review ───────────┘

    any live state ──sample on──▶ SAMPLE_PREVIEW ──sample off──▶ EDITING

Entering SUBMITTING is the only transition that performs I/O. Each
submission carries the session epoch at the time it started; new review
and sample toggles advance the epoch, so a response that lands after the
user moved on is discarded instead of overwriting what is displayed.

All transitions hold one re-entrant lock, so a caller on another thread
sees each state check and its write as a single step.
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from codeguard.agents.base import AgentClient
from codeguard.core.config import settings
from codeguard.domain.models import ReviewResult
from codeguard.domain.sample import SAMPLE_CODE, sample_result
from codeguard.normalizers.review_normalizer import normalize
from codeguard.normalizers.util import as_mapping

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Analysis failed. Please try again."
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


class SessionState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    RESULT = "result"
    ERROR = "error"
    SAMPLE_PREVIEW = "sample_preview"


# States in which the user may edit code and submit
_EDITABLE = (SessionState.EDITING, SessionState.ERROR)


class SessionStateError(RuntimeError):
    """Raised when an event is not legal in the current state."""


@dataclass(frozen=True)
class SubmitTicket:
    epoch: int
    message: str
    language: str
    agent_id: str


@dataclass(frozen=True)
class SessionSnapshot:
    session_id: str
    state: SessionState
    code: str
    language: str
    error: str | None
    result: ReviewResult | None
    epoch: int

    @property
    def loading(self) -> bool:
        return self.state is SessionState.SUBMITTING

    @property
    def sample_mode(self) -> bool:
        return self.state is SessionState.SAMPLE_PREVIEW

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "code": self.code,
            "language": self.language,
            "loading": self.loading,
            "sample_mode": self.sample_mode,
            "error": self.error,
            "result": self.result.to_dict() if self.result else None,
        }


Listener = Callable[[SessionSnapshot], None]


def compose_instruction(language: str, code: str) -> str:
    return (
        f"Review the following {language} code for security vulnerabilities, "
        f"performance issues, and style guide adherence:\n\n{code}"
    )


def _is_present(value: Any) -> bool:
    """Presence test for envelope fields.

    None, False, zero, NaN and "" are absent. Containers are present even
    when empty: ``{"result": {}}`` is a usable (empty) review.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


class ReviewSession:
    def __init__(
        self,
        session_id: str | None = None,
        language: str | None = None,
        agent_id: str | None = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.agent_id = agent_id or settings.AGENT_ID
        self._state = SessionState.EDITING
        self._code = ""
        self._language = language or settings.DEFAULT_LANGUAGE
        self._error: str | None = None
        self._result: ReviewResult | None = None
        self._epoch = 0
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    # ── Read side ─────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                session_id=self.session_id,
                state=self._state,
                code=self._code,
                language=self._language,
                error=self._error,
                result=self._result,
                epoch=self._epoch,
            )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a snapshot after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Editing ───────────────────────────────────────────────────

    def set_code(self, code: str) -> None:
        with self._lock:
            self._require(_EDITABLE, "edit code")
            self._update(code=code)

    def clear_code(self) -> None:
        with self._lock:
            self._require(_EDITABLE, "clear code")
            self._update(code="")

    def set_language(self, language: str) -> None:
        with self._lock:
            self._require(_EDITABLE, "change language")
            self._update(language=language)

    # ── Submission ────────────────────────────────────────────────

    def begin_submit(self) -> SubmitTicket | None:
        """Enter SUBMITTING and return the ticket for the agent call.

        Returns None without changing state when the code is blank.
        """
        with self._lock:
            self._require(_EDITABLE, "submit")
            if not self._code.strip():
                logger.info("Ignoring blank submission", extra=self._log_extra())
                return None

            self._epoch += 1
            ticket = SubmitTicket(
                epoch=self._epoch,
                message=compose_instruction(self._language, self._code),
                language=self._language,
                agent_id=self.agent_id,
            )
            logger.info(
                "Submitting %d chars of %s for review",
                len(self._code),
                self._language,
                extra=self._log_extra(),
            )
            self._update(state=SessionState.SUBMITTING, error=None)
            return ticket

    def complete(self, ticket: SubmitTicket, envelope: Any) -> bool:
        """Apply an agent response envelope. Returns False if the ticket is stale.

        The stale check and the write happen under one lock hold, so a reset
        from another thread lands either before (and the response is dropped)
        or after (and replaces the result).
        """
        env = as_mapping(envelope)
        payload = as_mapping(env.get("response")).get("result")

        with self._lock:
            if self._is_stale(ticket):
                return False

            if _is_present(env.get("success")) and _is_present(payload):
                result = normalize(payload, ticket.language)
                logger.info(
                    "Review complete: score=%d, issues=%d",
                    result.overall_score,
                    result.issue_counts.total,
                    extra=self._log_extra(),
                )
                self._update(state=SessionState.RESULT, result=result, error=None)
                return True

            error = env.get("error")
            message = error if isinstance(error, str) and error else ANALYSIS_FAILED
            logger.warning("Review failed: %s", message, extra=self._log_extra())
            self._update(state=SessionState.ERROR, error=message)
            return True

    def fail(self, ticket: SubmitTicket, exc: BaseException) -> bool:
        """Apply a transport failure. Returns False if the ticket is stale."""
        with self._lock:
            if self._is_stale(ticket):
                return False
            logger.error(
                "Agent call raised: %s",
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
                extra=self._log_extra(),
            )
            self._update(state=SessionState.ERROR, error=UNEXPECTED_ERROR)
            return True

    async def submit(self, client: AgentClient) -> SessionSnapshot:
        """Run one review end to end. The agent call is the only await."""
        ticket = self.begin_submit()
        if ticket is None:
            return self.snapshot()

        try:
            envelope = await asyncio.to_thread(client.call_agent, ticket.message, ticket.agent_id)
        except Exception as e:
            self.fail(ticket, e)
        else:
            self.complete(ticket, envelope)
        return self.snapshot()

    # ── Reset / sample mode ───────────────────────────────────────

    def new_review(self) -> None:
        with self._lock:
            self._require(
                (SessionState.RESULT, SessionState.ERROR, SessionState.SUBMITTING, SessionState.SAMPLE_PREVIEW),
                "start a new review",
            )
            self._epoch += 1
            self._update(state=SessionState.EDITING, code="", error=None, result=None)

    def toggle_sample(self, enabled: bool) -> None:
        with self._lock:
            if enabled:
                self._epoch += 1
                self._update(
                    state=SessionState.SAMPLE_PREVIEW,
                    code=SAMPLE_CODE,
                    result=sample_result(),
                    error=None,
                )
            elif self._state is SessionState.SAMPLE_PREVIEW:
                self._epoch += 1
                self._update(state=SessionState.EDITING, code="", result=None, error=None)

    # ── Internals ─────────────────────────────────────────────────

    def _require(self, allowed: tuple[SessionState, ...], action: str) -> None:
        if self._state not in allowed:
            raise SessionStateError(f"Cannot {action} while session is {self._state.value}")

    def _is_stale(self, ticket: SubmitTicket) -> bool:
        if ticket.epoch == self._epoch and self._state is SessionState.SUBMITTING:
            return False
        logger.info(
            "Discarding stale response for epoch %d",
            ticket.epoch,
            extra=self._log_extra(),
        )
        return True

    def _update(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, f"_{name}", value)
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    def _log_extra(self) -> dict[str, Any]:
        return {"session_id": self.session_id, "epoch": self._epoch}
