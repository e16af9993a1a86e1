from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from codeguard.agents.base import AgentClient
from codeguard.core.config import settings
from codeguard.core.containers import build_agent_registry, build_session_store
from codeguard.services.review_session import ReviewSession, SessionStateError

router = APIRouter(prefix="/api", tags=["session"])

# Build once at module level
_store = build_session_store()
agent_registry = build_agent_registry()


# ── Request / Response schemas ────────────────────────────────────
class CreateSessionRequest(BaseModel):
    """Optional body for creating a session."""

    language: str | None = Field(
        None,
        description="Initial language selection. Defaults to the configured default language.",
        json_schema_extra={"examples": ["Python"]},
    )


class CodeRequest(BaseModel):
    code: str = Field(..., description="Source code or PR diff to review.")


class LanguageRequest(BaseModel):
    language: str = Field(..., json_schema_extra={"examples": ["Python"]})


class SampleRequest(BaseModel):
    enabled: bool = Field(..., description="Turn sample mode on or off.")


class SessionResponse(BaseModel):
    """Current state of one review session."""

    session_id: str
    state: str = Field(..., description="editing, submitting, result, error or sample_preview.")
    code: str
    language: str
    loading: bool
    sample_mode: bool
    error: str | None = None
    result: dict[str, Any] | None = Field(None, description="Normalized review, when one is held.")


# ── Dependencies ──────────────────────────────────────────────────
def get_session(session_id: str) -> ReviewSession:
    session = _store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def get_agent(
    agent: str | None = Query(None, description="Agent backend to use instead of the configured default."),
) -> AgentClient:
    if agent:
        try:
            return agent_registry.pick(agent)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    backend = agent_registry.get_default(settings.AGENT_PROVIDER)
    if backend is None:
        raise HTTPException(status_code=503, detail="No review agent configured")
    return backend


def _apply(session: ReviewSession, action, *args) -> dict[str, Any]:
    try:
        action(*args)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.snapshot().to_dict()


# ── Endpoints ─────────────────────────────────────────────────────
@router.get("/agents", summary="List agent backends")
def list_agents() -> dict[str, Any]:
    return {
        "default": settings.AGENT_PROVIDER,
        "available": agent_registry.list(),
        "configured": agent_registry.list_configured(),
    }


@router.get("/languages", summary="List selectable languages")
def list_languages() -> dict[str, Any]:
    return {"default": settings.DEFAULT_LANGUAGE, "languages": settings.SUPPORTED_LANGUAGES}


@router.post(
    "/session",
    response_model=SessionResponse,
    summary="Create a review session",
    response_description="The new session in the editing state",
)
async def create_session(req: CreateSessionRequest | None = None) -> dict[str, Any]:
    session = _store.create(language=req.language if req else None)
    return session.snapshot().to_dict()


@router.delete("/session/{session_id}", status_code=204, summary="Delete a session")
async def delete_session(session_id: str) -> None:
    if not _store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")


@router.get("/session/{session_id}", response_model=SessionResponse, summary="Get session state")
async def read_session(session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    return session.snapshot().to_dict()


@router.put("/session/{session_id}/code", response_model=SessionResponse, summary="Replace the code")
async def put_code(req: CodeRequest, session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    return _apply(session, session.set_code, req.code)


@router.delete("/session/{session_id}/code", response_model=SessionResponse, summary="Clear the code")
async def delete_code(session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    return _apply(session, session.clear_code)


@router.put("/session/{session_id}/language", response_model=SessionResponse, summary="Select the language")
async def put_language(req: LanguageRequest, session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    return _apply(session, session.set_language, req.language)


@router.post(
    "/session/{session_id}/submit",
    response_model=SessionResponse,
    summary="Submit the code for review",
    response_description="The session after the agent answered (result or error)",
)
async def submit(
    session: ReviewSession = Depends(get_session),
    agent: AgentClient = Depends(get_agent),
) -> dict[str, Any]:
    """Send the code to the review agent and wait for its answer.

    Blank code is a no-op and returns the session unchanged. Agent
    failures are reported in `error`, not as HTTP errors.
    """
    try:
        snap = await session.submit(agent)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return snap.to_dict()


@router.post("/session/{session_id}/new-review", response_model=SessionResponse, summary="Start a new review")
async def new_review(session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    return _apply(session, session.new_review)


@router.post("/session/{session_id}/sample", response_model=SessionResponse, summary="Toggle sample mode")
async def toggle_sample(req: SampleRequest, session: ReviewSession = Depends(get_session)) -> dict[str, Any]:
    return _apply(session, session.toggle_sample, req.enabled)
