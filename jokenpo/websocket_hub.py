from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from fastapi import WebSocket

from jokenpo.audio import AudioCall
from jokenpo.presentation import CommandSink, PresentationCommand

logger = logging.getLogger(__name__)

# A client that cannot take a message within this window is treated as gone.
SEND_TIMEOUT_S = 2.0


class SessionWebSocketHub:
    """In-process WebSocket pub/sub keyed by session_id.

    Contract:
      - assign connection to a session via `connect(session_id, websocket)`.
      - broadcast JSON payloads with `broadcast(session_id, payload)`.
      - `publish(session_id, payload)` is the fire-and-forget variant for synchronous callers
        running on the event loop (the round controller).
      - ordering is per session; a slow client only delays its own session.
    """

    def __init__(self, *, send_timeout_s: float = SEND_TIMEOUT_S) -> None:
        self.send_timeout_s = send_timeout_s
        self._by_session: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()
        # Held for a whole broadcast so a session's commands reach clients in the order they were issued.
        self._send_locks: dict[str, asyncio.Lock] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    def connection_count(self, session_id: str) -> int:
        return len(self._by_session.get(session_id, ()))

    async def connect(self, session_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._by_session[session_id].add(websocket)

    async def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            self._discard(session_id, [websocket])

    def _discard(self, session_id: str, websockets: list[WebSocket]) -> None:
        conns = self._by_session.get(session_id)
        if not conns:
            return
        for ws in websockets:
            conns.discard(ws)
        if not conns:
            self._by_session.pop(session_id, None)
            self._send_locks.pop(session_id, None)

    async def broadcast(self, session_id: str, payload: dict[str, object]) -> None:
        if session_id not in self._by_session:
            return
        send_lock = self._send_locks.setdefault(session_id, asyncio.Lock())
        async with send_lock:
            await self._broadcast(session_id, payload)

    async def _broadcast(self, session_id: str, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._by_session.get(session_id, set()))

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await asyncio.wait_for(ws.send_json(payload), timeout=self.send_timeout_s)
            except Exception:
                dead.append(ws)

        if dead:
            logger.debug("dropping %d dead websocket(s) for session %s", len(dead), session_id)
            async with self._lock:
                self._discard(session_id, dead)

    def publish(self, session_id: str, payload: dict[str, object]) -> None:
        if session_id not in self._by_session:
            return
        # Raises RuntimeError outside a running loop; sink callers treat that as a no-op.
        task = asyncio.get_running_loop().create_task(self.broadcast(session_id, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class WebSocketSink(CommandSink):
    def __init__(self, *, hub: SessionWebSocketHub, session_id: str) -> None:
        self.hub = hub
        self.session_id = session_id

    def emit(self, command: PresentationCommand) -> None:
        self.hub.publish(self.session_id, dict(command.as_payload()))

    def emit_audio(self, call: AudioCall) -> None:
        self.hub.publish(self.session_id, dict(call.as_payload()))


hub = SessionWebSocketHub()
