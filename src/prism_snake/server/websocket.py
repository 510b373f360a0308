"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from prism_snake.server.session_manager import SessionManager
from prism_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Send directions or restart requests, receive state after every tick."""
    manager = _get_manager(websocket)
    hosted = manager.get_session(session_id)
    if hosted is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    hosted.clients.append(websocket)
    logger.info("Client connected to session %s.", session_id)

    # Send initial state snapshot so the client can draw immediately.
    async with hosted.lock:
        state = hosted.state()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("action") == "restart":
                try:
                    await manager.restart_session(session_id)
                except RuntimeError:
                    logger.debug("Ignored restart of running session %s.", session_id)
                except KeyError:
                    break
                continue

            direction_str = msg.get("direction")
            if not isinstance(direction_str, str):
                continue
            try:
                direction = Direction.from_name(direction_str)
            except ValueError:
                continue
            try:
                await manager.set_direction(session_id, direction)
            except KeyError:
                break
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        if websocket in hosted.clients:
            hosted.clients.remove(websocket)
