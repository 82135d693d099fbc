from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import partial
from uuid import UUID, uuid4

import redis

from jokenpo.audio import AudioCall, InMemoryAudio
from jokenpo.config import GameSettings
from jokenpo.controller import RoundController
from jokenpo.core.events import RoundResult
from jokenpo.presentation import FanoutSink, guarded
from jokenpo.streams import Outbox, RedisStreamSink, drop_outbox
from jokenpo.websocket_hub import SessionWebSocketHub, WebSocketSink, hub as default_hub

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True)
class GameSession:
    session_id: UUID
    created_at: datetime
    # For reproducibility/debugging.
    seed: int
    controller: RoundController
    audio: InMemoryAudio
    # Client holding the presentation outbox, when one was attached.
    r: redis.Redis | None = None


@dataclass(slots=True)
class SessionRegistry:
    """Process-local sessions. Scores live only as long as the process."""

    settings: GameSettings = field(default_factory=GameSettings)
    hub: SessionWebSocketHub = field(default_factory=lambda: default_hub)
    _sessions: dict[UUID, GameSession] = field(default_factory=dict)

    def create(self, *, r: redis.Redis | None = None, seed: int | None = None) -> GameSession:
        session_id = uuid4()
        sid = str(session_id)
        if seed is None:
            seed = random.SystemRandom().randint(1, 2**31 - 1)

        sinks: list[WebSocketSink | RedisStreamSink] = [WebSocketSink(hub=self.hub, session_id=sid)]
        if r is not None:
            sinks.append(RedisStreamSink(r=r, session_id=sid))

        def _forward_audio(call: AudioCall) -> None:
            for sink in sinks:
                guarded(sink.emit_audio, call, what=f"{type(sink).__name__}.emit_audio")

        audio = InMemoryAudio(on_call=_forward_audio)
        controller = RoundController(
            sink=FanoutSink(sinks),
            audio=audio,
            rng=random.Random(seed),
            settings=self.settings,
        )

        def _announce(result: RoundResult) -> None:
            payload = {"type": "round_completed", "session_id": sid, **round_payload(result)}
            guarded(self.hub.publish, sid, payload, what="round_completed")

        controller.add_listener(_announce)
        controller.start()

        gs = GameSession(
            session_id=session_id, created_at=_now(), seed=seed, controller=controller, audio=audio, r=r
        )
        self._sessions[session_id] = gs
        logger.info("session %s created (seed=%s)", sid, seed)
        return gs

    def get(self, session_id: UUID) -> GameSession | None:
        return self._sessions.get(session_id)

    def require(self, session_id: UUID) -> GameSession:
        gs = self.get(session_id)
        if gs is None:
            raise ValueError("Session not found")
        return gs

    def list_sessions(self) -> list[GameSession]:
        return sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)

    def discard(self, session_id: UUID) -> None:
        gs = self._sessions.pop(session_id, None)
        if gs is None:
            return
        gs.controller.close()
        if gs.r is not None:
            outbox = Outbox(session_id=str(session_id))
            guarded(partial(drop_outbox, r=gs.r, outbox=outbox), what=f"drop {outbox.key}")
        logger.info("session %s discarded", session_id)


def round_payload(result: RoundResult) -> dict[str, object]:
    return {
        "human_move": result.human_move.value,
        "opponent_move": result.opponent_move.value,
        "outcome": result.outcome.value,
        "player_score": result.score_after[0],
        "opponent_score": result.score_after[1],
        "special_events": [e.value for e in result.special_events],
        "headline": result.headline,
    }
