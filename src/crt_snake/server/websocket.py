"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from crt_snake.codec import Direction
from crt_snake.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send turns or restarts, receive a frame each tick."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.clients.append(websocket)
    logger.info("Client connected to session %s.", session_id)

    # Send an initial frame so the client can draw immediately.
    async with session.lock:
        frame = session.frame()
    await websocket.send_text(json.dumps(frame, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("restart") is True:
                await manager.restart(session_id)
                continue

            direction_str = msg.get("direction")
            if not isinstance(direction_str, str):
                continue
            direction = _DIRECTION_MAP.get(direction_str.lower())
            if direction is None:
                continue
            await manager.enqueue_direction(session_id, direction)
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    except KeyError:
        # Session was removed while the client was connected.
        logger.info("Session %s closed under client.", session_id)
    finally:
        if websocket in session.clients:
            session.clients.remove(websocket)
