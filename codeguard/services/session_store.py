from __future__ import annotations

import logging

from codeguard.services.review_session import ReviewSession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory registry of review sessions. Nothing is persisted; sessions
    do not share state.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, ReviewSession] = {}

    def create(self, language: str | None = None) -> ReviewSession:
        session = ReviewSession(language=language)
        self._sessions[session.session_id] = session
        logger.info("Session created", extra={"session_id": session.session_id})
        return session

    def get(self, session_id: str) -> ReviewSession | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.info("Session deleted", extra={"session_id": session_id})
        return True

    def __len__(self) -> int:
        return len(self._sessions)
