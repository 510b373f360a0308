"""In-memory session registry, lifecycle management, and async frame loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from prism_snake.config import GameConfig
from prism_snake.loop import GameLoop
from prism_snake.server.models import HostStatus, SessionSummary
from prism_snake.snake import Direction

logger = logging.getLogger(__name__)

# Simple rate limit: max sessions created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_RATE_COMPACT_INTERVAL = 60.0  # seconds between stale-key sweeps
_MAX_FINISHED_SESSIONS = 100


def _now_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class HostedSession:
    """A game loop plus the sockets watching it."""

    session_id: str
    config: GameConfig
    loop: GameLoop
    frame_rate: int
    status: HostStatus = HostStatus.IDLE
    clients: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    def state(self) -> dict:
        return self.loop.session.to_dict()

    def summary(self) -> SessionSummary:
        session = self.loop.session
        return SessionSummary(
            session_id=self.session_id,
            status=self.status,
            game_status=session.status.value,
            tick=session.tick,
            grid_width=session.grid.width,
            grid_height=session.grid.height,
            step_ms=self.config.step_ms,
        )


class SessionManager:
    """Central registry managing all hosted sessions."""

    def __init__(self, max_finished_sessions: int = _MAX_FINISHED_SESSIONS) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self._sessions: dict[str, HostedSession] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._last_rate_compact: float = 0.0
        self._max_finished_sessions = max_finished_sessions

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = self._rate_limits.get(client_ip, [])
        timestamps = [t for t in timestamps if now - t < _RATE_LIMIT_WINDOW]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        self._compact_rate_limits(now)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _compact_rate_limits(self, now: float) -> None:
        """Remove rate-limit entries whose timestamps have all expired."""
        if now - self._last_rate_compact < _RATE_COMPACT_INTERVAL:
            return
        self._last_rate_compact = now
        stale_ips = [
            ip for ip, ts in self._rate_limits.items()
            if all(now - t >= _RATE_LIMIT_WINDOW for t in ts)
        ]
        for ip in stale_ips:
            del self._rate_limits[ip]
        if stale_ips:
            logger.info(
                "Compacted %d stale rate-limit entries.", len(stale_ips),
            )

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_session(
        self,
        grid_width: int = 40,
        grid_height: int = 30,
        step_ms: float = 100.0,
        frame_rate: int = 60,
        seed: int | None = None,
        client_ip: str = "unknown",
    ) -> HostedSession:
        """Create a new idle session and return it."""
        if not self._check_rate_limit(client_ip):
            raise ValueError("Rate limit exceeded. Try again later.")

        config = GameConfig(
            grid_width=grid_width,
            grid_height=grid_height,
            step_ms=step_ms,
            fps=frame_rate,
            seed=seed,
        )
        session_id = uuid.uuid4().hex[:12]
        hosted = HostedSession(
            session_id=session_id,
            config=config,
            loop=GameLoop.from_config(config),
            frame_rate=frame_rate,
        )
        self._sessions[session_id] = hosted
        self._record_creation(client_ip)
        logger.info(
            "Session %s created (%dx%d, %.0f ms/tick).",
            session_id, grid_width, grid_height, step_ms,
        )
        return hosted

    def get_session(self, session_id: str) -> HostedSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> HostedSession:
        hosted = self._sessions.get(session_id)
        if hosted is None:
            raise KeyError(f"Session {session_id} not found.")
        return hosted

    def list_sessions(self) -> list[SessionSummary]:
        return [hosted.summary() for hosted in self._sessions.values()]

    def start_session(self, session_id: str) -> None:
        """Start the frame loop. Must be called from a running event loop."""
        hosted = self._require(session_id)
        if hosted.status == HostStatus.ACTIVE:
            raise RuntimeError("Session is already running.")

        # Drop any stale timestamp so an idle period is not replayed.
        hosted.loop.clock.reset()
        hosted.status = HostStatus.ACTIVE
        hosted._task = asyncio.create_task(self._frame_loop(hosted))
        logger.info("Session %s started.", session_id)

    async def set_direction(self, session_id: str, direction: Direction) -> bool:
        hosted = self._require(session_id)
        async with hosted.lock:
            return hosted.loop.on_direction_input(direction)

    async def restart_session(self, session_id: str) -> dict:
        """Replace a finished game with a fresh one and broadcast it.

        A session whose frame loop was parked at game over is resumed.
        """
        hosted = self._require(session_id)
        async with hosted.lock:
            if not hosted.loop.on_restart():
                raise RuntimeError("Game is still running.")
            state = hosted.state()
            parked = hosted.finished_at is not None
            hosted.finished_at = None
        if parked and hosted.status == HostStatus.IDLE:
            self.start_session(session_id)
        await self._broadcast(hosted, state)
        return state

    async def delete_session(self, session_id: str) -> None:
        hosted = self._sessions.pop(session_id, None)
        if hosted is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop(hosted)
        await self._close_connections(hosted)
        logger.info("Session %s deleted.", session_id)

    async def _frame_loop(self, hosted: HostedSession) -> None:
        """Feed wall-clock frames to the game loop, broadcasting on each tick.

        The loop parks once the game ends; a restart resumes it.
        """
        frame_interval = 1.0 / hosted.frame_rate
        finished = False
        try:
            while hosted.status == HostStatus.ACTIVE:
                async with hosted.lock:
                    ticks = hosted.loop.on_frame(_now_ms())
                    state = hosted.state() if ticks else None
                    if hosted.loop.session.game_over:
                        self._mark_session_finished(hosted)
                        finished = True
                if state is not None:
                    await self._broadcast(hosted, state)
                if finished:
                    break
                await asyncio.sleep(frame_interval)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled for session %s.", hosted.session_id)
        except Exception:
            logger.exception("Frame loop error in session %s.", hosted.session_id)
        finally:
            # A restart may already have started a replacement task.
            if hosted._task is asyncio.current_task():
                hosted.status = HostStatus.IDLE
        if finished:
            await self._prune_finished_sessions()

    def _mark_session_finished(self, hosted: HostedSession) -> None:
        hosted.status = HostStatus.IDLE
        hosted.finished_at = time.monotonic()
        logger.info(
            "Session %s finished (%s) at tick %d.",
            hosted.session_id,
            hosted.loop.session.status.value,
            hosted.loop.session.tick,
        )

    async def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished_sessions = [
            s for s in self._sessions.values()
            if s.status == HostStatus.IDLE and s.loop.session.game_over
        ]
        overflow = len(finished_sessions) - self._max_finished_sessions
        if overflow <= 0:
            return

        finished_sessions.sort(
            key=lambda s: s.finished_at if s.finished_at is not None else s.created_at,
        )
        for stale in finished_sessions[:overflow]:
            if stale.status != HostStatus.IDLE:
                continue
            self._sessions.pop(stale.session_id, None)
            await self._stop(stale)
            await self._close_connections(stale)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def _stop(self, hosted: HostedSession) -> None:
        task = hosted._task
        hosted.status = HostStatus.IDLE
        if (
            task is not None
            and task is not asyncio.current_task()
            and not task.done()
        ):
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        hosted._task = None

    async def _close_connections(self, hosted: HostedSession) -> None:
        """Close any live client sockets for a removed session."""
        for ws in list(hosted.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing client socket in session %s.",
                    hosted.session_id,
                )
        hosted.clients.clear()

    async def _broadcast(self, hosted: HostedSession, state: dict) -> None:
        """Send session state to all connected clients."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so concurrent disconnect handlers can mutate
        # the live client list without affecting this send loop.
        for ws in list(hosted.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in hosted.clients:
                hosted.clients.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running frame loops and release rate-limit state."""
        for hosted in list(self._sessions.values()):
            await self._stop(hosted)
        self._rate_limits.clear()
        logger.info("SessionManager cleanup complete.")
