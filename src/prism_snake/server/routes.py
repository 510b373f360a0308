"""REST API route handlers for session lifecycle and input."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from prism_snake.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    DirectionResponse,
    SessionSummary,
)
from prism_snake.snake import Direction

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new game session, optionally starting its frame loop."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        hosted = manager.create_session(
            grid_width=body.grid_width,
            grid_height=body.grid_height,
            step_ms=body.step_ms,
            frame_rate=body.frame_rate,
            seed=body.seed,
            client_ip=client_ip,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if body.autostart:
        manager.start_session(hosted.session_id)
    return hosted.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List all hosted sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the full game state."""
    hosted = _get_manager(request).get_session(session_id)
    if hosted is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    async with hosted.lock:
        result = hosted.summary().model_dump(mode="json")
        result["state"] = hosted.state()
    return result


@router.post("/{session_id}/start", status_code=200)
async def start_session(session_id: str, request: Request) -> dict:
    """Start the session's frame loop."""
    try:
        _get_manager(request).start_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"status": "started", "session_id": session_id}


@router.post("/{session_id}/direction")
async def set_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> DirectionResponse:
    """Steer the snake. Reversals are ignored and reported as not accepted."""
    try:
        direction = Direction.from_name(body.direction)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        accepted = await _get_manager(request).set_direction(session_id, direction)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return DirectionResponse(
        session_id=session_id,
        direction=direction.name.lower(),
        accepted=accepted,
    )


@router.post("/{session_id}/restart")
async def restart_session(session_id: str, request: Request) -> dict:
    """Start a new game once the current one has ended."""
    try:
        return await _get_manager(request).restart_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    """Stop and remove a session."""
    try:
        await _get_manager(request).delete_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
