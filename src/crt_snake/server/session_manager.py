"""In-memory session registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from crt_snake.codec import Direction
from crt_snake.config import GameConfig
from crt_snake.engine import GameEngine, GridCorruptedError
from crt_snake.server.models import SessionSummary
from crt_snake.signals import FrameSignals

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class GameSession:
    """A hosted engine plus the sockets watching it."""

    session_id: str
    engine: GameEngine
    clients: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    last_active: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def config(self) -> GameConfig:
        return self.engine.config

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            state=self.engine.state.value,
            score=self.engine.current_score(),
            grid_size=self.config.grid_size,
            tick_rate_ms=self.config.tick_rate_ms,
        )

    def frame(self) -> dict:
        """Return the frame message for the engine's current state."""
        return FrameSignals.capture(self.engine).to_dict(tick=self.engine.ticks)


class SessionManager:
    """Central registry managing all hosted sessions.

    Every mutation of a session's engine (tick, queued input, restart)
    happens under that session's lock so a tick is never observed halfway.
    """

    def __init__(
        self,
        max_sessions: int = _MAX_SESSIONS,
        autostart: bool = True,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, GameSession] = {}
        self._max_sessions = max_sessions
        self._autostart = autostart

    async def create_session(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
    ) -> GameSession:
        """Create a session and start its tick loop."""
        if len(self._sessions) >= self._max_sessions:
            await self._prune_finished_sessions()
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Try again later.")

        session_id = uuid.uuid4().hex[:12]
        session = GameSession(
            session_id=session_id,
            engine=GameEngine(config, seed=seed),
        )
        self._sessions[session_id] = session
        if self._autostart:
            session._task = asyncio.create_task(self._tick_loop(session))
        logger.info(
            "Session %s created (grid=%d, tick=%dms).",
            session_id, session.config.grid_size, session.config.tick_rate_ms,
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def enqueue_direction(
        self, session_id: str, direction: Direction,
    ) -> bool:
        """Queue a turn on the session's engine."""
        session = self.require_session(session_id)
        async with session.lock:
            session.last_active = time.monotonic()
            return session.engine.enqueue_direction(direction)

    async def restart(self, session_id: str) -> GameSession:
        """Reset the session's engine in place."""
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.restart()
            session.last_active = time.monotonic()
        return session

    async def remove_session(self, session_id: str) -> None:
        """Stop a session's tick loop, close its sockets and forget it."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop(session)
        logger.info("Session %s removed.", session_id)

    async def advance(self, session: GameSession) -> dict:
        """Tick a session once and return its frame."""
        async with session.lock:
            try:
                session.engine.tick()
            except GridCorruptedError:
                # Already logged by the engine; the session is now over.
                logger.warning(
                    "Session %s ended after grid corruption.",
                    session.session_id,
                )
            return session.frame()

    async def _tick_loop(self, session: GameSession) -> None:
        """Tick the session at its configured rate, broadcasting each frame."""
        interval = session.config.tick_interval
        try:
            while True:
                await asyncio.sleep(interval)
                frame = await self.advance(session)
                await self._broadcast(session, frame)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)

    async def _prune_finished_sessions(self) -> None:
        """Drop finished sessions nobody is watching, least recently active first."""
        finished = [
            s for s in self._sessions.values()
            if s.engine.game_over and not s.clients
        ]
        if not finished:
            return
        finished.sort(key=lambda s: s.last_active)
        stale = finished[0]
        self._sessions.pop(stale.session_id, None)
        await self._stop(stale)
        logger.info("Pruned finished session %s.", stale.session_id)

    async def _broadcast(self, session: GameSession, frame: dict) -> None:
        """Send a frame to every connected client."""
        payload = json.dumps(frame, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(session.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in session.clients:
                session.clients.remove(ws)

    async def _stop(self, session: GameSession) -> None:
        task = session._task
        if task and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        for ws in list(session.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", session.session_id,
                )
        session.clients.clear()

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        sessions = list(self._sessions.values())
        for session in sessions:
            await self._stop(session)
        logger.info("SessionManager cleanup complete.")
