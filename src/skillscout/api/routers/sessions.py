"""Session resource router."""

from fastapi import APIRouter, Depends, HTTPException, status

from skillscout.api.deps import get_context
from skillscout.api.schemas import ResolveRequest, ResolveResponse, SessionInfo
from skillscout.core.context import SharedContext
from skillscout.core.exceptions import SessionNotFoundError, StaleSessionError
from skillscout.core.session import Session
from skillscout.core.skill_def import Query

router = APIRouter()


def _get_session(session_id: str, ctx: SharedContext) -> Session:
    try:
        return ctx.sessions.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


@router.get("", response_model=list[str])
def list_sessions(ctx: SharedContext = Depends(get_context)) -> list[str]:
    """List live session ids."""
    return ctx.sessions.list_ids()


@router.post("", response_model=SessionInfo, status_code=status.HTTP_201_CREATED)
def create_session(ctx: SharedContext = Depends(get_context)) -> SessionInfo:
    """Start a new session against the current corpus."""
    return SessionInfo.from_session(ctx.new_session())


@router.get("/{session_id}", response_model=SessionInfo)
def get_session(session_id: str, ctx: SharedContext = Depends(get_context)) -> SessionInfo:
    """Get what a session has loaded so far."""
    return SessionInfo.from_session(_get_session(session_id, ctx))


@router.post("/{session_id}/resolve", response_model=ResolveResponse)
def resolve(
    session_id: str, data: ResolveRequest, ctx: SharedContext = Depends(get_context)
) -> ResolveResponse:
    """Match a query and disclose its content into the session."""
    session = _get_session(session_id, ctx)
    query = Query(
        text=data.text,
        skill_hints=data.skill_hints,
        reference_hints=data.reference_hints,
    )
    try:
        matches, content = ctx.resolve(session, query, data.budget)
    except StaleSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ResolveResponse(matches=matches, content=content)


@router.post("/{session_id}/reset", response_model=SessionInfo)
def reset_session(
    session_id: str, ctx: SharedContext = Depends(get_context)
) -> SessionInfo:
    """Clear a session's cache and budget."""
    session = _get_session(session_id, ctx)
    session.reset()
    return SessionInfo.from_session(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, ctx: SharedContext = Depends(get_context)) -> None:
    """End a session."""
    try:
        ctx.sessions.end(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
