"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from crt_snake.codec import Direction
from crt_snake.config import GameConfig
from crt_snake.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    DirectionResponse,
    ErrorResponse,
    SessionSummary,
)
from crt_snake.server.session_manager import SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create and start a new game session."""
    manager = _get_manager(request)
    try:
        config = GameConfig(
            grid_size=body.grid_size,
            start_coil=body.start_coil,
            tick_rate_ms=body.tick_rate_ms,
            growth_ratio=body.growth_ratio,
            time_to_full_noise=body.time_to_full_noise,
        )
        session = await manager.create_session(config, seed=body.seed)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List hosted sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}", responses=_NOT_FOUND)
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and full engine state."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    async with session.lock:
        result = session.summary().model_dump()
        result["config"] = session.config.to_dict()
        result["engine"] = session.engine.get_state()
    return result


@router.post("/{session_id}/restart", responses=_NOT_FOUND)
async def restart_session(session_id: str, request: Request) -> SessionSummary:
    """Reset a session to its initial state."""
    try:
        session = await _get_manager(request).restart(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return session.summary()


@router.post("/{session_id}/direction", responses=_NOT_FOUND)
async def queue_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> DirectionResponse:
    """Queue a turn for the session's snake."""
    manager = _get_manager(request)
    direction = Direction[body.direction.name]
    try:
        queued = await manager.enqueue_direction(session_id, direction)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    session = manager.require_session(session_id)
    return DirectionResponse(
        queued=queued, queue_length=len(session.engine.queue),
    )


@router.delete("/{session_id}", status_code=204, responses=_NOT_FOUND)
async def delete_session(session_id: str, request: Request) -> Response:
    """Stop and discard a session."""
    try:
        await _get_manager(request).remove_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
