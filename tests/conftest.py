from __future__ import annotations

import itertools
import random
from collections.abc import Callable, Generator, Iterable
from dataclasses import dataclass, field

import fakeredis
import pytest
from fastapi.testclient import TestClient

from jokenpo.api.deps import get_redis, get_registry
from jokenpo.audio import InMemoryAudio, Track
from jokenpo.config import GameSettings
from jokenpo.controller import RoundController
from jokenpo.core.moves import Move
from jokenpo.main import app
from jokenpo.presentation import RecordingSink
from jokenpo.session import Session
from jokenpo.session_store import SessionRegistry
from jokenpo.websocket_hub import SessionWebSocketHub


class ScriptedOpponent:
    """Deterministic opponent: plays the given moves in order, cycling."""

    def __init__(self, moves: Iterable[Move]) -> None:
        self._moves = itertools.cycle(list(moves))

    def generate(self) -> Move:
        return next(self._moves)


@dataclass
class ManualHandle:
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualTimer:
    """Timer stub: continuations run only when the test calls `fire()`."""

    pending: list[ManualHandle] = field(default_factory=list)
    delays: list[int] = field(default_factory=list)

    def after(self, delay_ms: int, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(callback)
        self.pending.append(handle)
        self.delays.append(delay_ms)
        return handle

    def fire(self) -> None:
        handles, self.pending = self.pending, []
        for h in handles:
            if not h.cancelled:
                h.callback()


class FailingSink:
    """Every rendering target is missing."""

    def __getattr__(self, name: str) -> Callable[..., None]:
        def _fail(*args: object, **kwargs: object) -> None:
            raise RuntimeError(f"no target for {name}")

        return _fail


class FailingAudio:
    def play(self, track: Track) -> None:
        raise RuntimeError("autoplay blocked")

    def pause(self, track: Track) -> None:
        raise RuntimeError("autoplay blocked")

    def set_loop(self, track: Track, loop: bool) -> None:
        raise RuntimeError("autoplay blocked")

    def seek(self, track: Track, t: float) -> None:
        raise RuntimeError("autoplay blocked")

    def is_playing(self, track: Track) -> bool:
        raise RuntimeError("autoplay blocked")


@dataclass
class Harness:
    controller: RoundController
    sink: RecordingSink
    audio: InMemoryAudio
    timer: ManualTimer

    def play(self, move: Move) -> bool:
        """Run a full round (shake, delay, resolve)."""

        started = self.controller.play_round(move)
        self.timer.fire()
        return started


@pytest.fixture()
def make_harness() -> Callable[..., Harness]:
    def _make(
        *,
        score: tuple[int, int] = (0, 0),
        opponent: Iterable[Move] = (Move.rock,),
        settings: GameSettings | None = None,
        background_playing: bool = False,
        seed: int = 7,
    ) -> Harness:
        sink = RecordingSink()
        audio = InMemoryAudio()
        if background_playing:
            audio.play(Track.background)
        timer = ManualTimer()
        controller = RoundController(
            session=Session.with_score(*score),
            sink=sink,
            audio=audio,
            timer=timer,
            opponent=ScriptedOpponent(opponent),
            rng=random.Random(seed),
            settings=settings,
        )
        controller.start()
        sink.clear()
        audio.calls.clear()
        return Harness(controller=controller, sink=sink, audio=audio, timer=timer)

    return _make


@pytest.fixture()
def registry() -> SessionRegistry:
    # Fresh hub per test: its locks bind to the TestClient's event loop.
    return SessionRegistry(settings=GameSettings(reveal_delay_ms=0), hub=SessionWebSocketHub())


@pytest.fixture()
def client_and_redis(registry: SessionRegistry) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    app.dependency_overrides[get_registry] = lambda: registry
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
