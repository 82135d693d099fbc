from __future__ import annotations

import asyncio
from typing import Any

import pytest

from jokenpo.config import GameSettings
from jokenpo.controller import RoundController
from jokenpo.core.events import RoundResult
from jokenpo.core.moves import Move, Outcome
from jokenpo.timers import AsyncioTimer
from jokenpo.websocket_hub import SessionWebSocketHub, WebSocketSink

from conftest import ScriptedOpponent


class _FakeWebSocket:
    def __init__(self, *, broken: bool = False, stalled: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.accepted = False
        self.broken = broken
        self.stalled = stalled

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, payload: dict[str, Any]) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        if self.stalled:
            await asyncio.Event().wait()
        self.sent.append(payload)


@pytest.mark.asyncio
async def test_round_completes_on_the_event_loop() -> None:
    done: asyncio.Future[RoundResult] = asyncio.get_running_loop().create_future()
    c = RoundController(
        timer=AsyncioTimer(),
        opponent=ScriptedOpponent([Move.paper]),
        settings=GameSettings(reveal_delay_ms=10),
    )
    c.add_listener(done.set_result)
    c.start()

    assert c.play_round(Move.scissors) is True
    assert c.busy is True

    result = await asyncio.wait_for(done, timeout=2)
    assert result.outcome == Outcome.player_wins
    assert c.busy is False
    assert c.player_score == 1


@pytest.mark.asyncio
async def test_reset_cancels_the_scheduled_reveal() -> None:
    c = RoundController(timer=AsyncioTimer(), settings=GameSettings(reveal_delay_ms=20))
    c.play_round(Move.rock)
    c.reset()

    await asyncio.sleep(0.05)
    assert c.last_result is None
    assert (c.player_score, c.opponent_score) == (0, 0)


@pytest.mark.asyncio
async def test_hub_delivers_in_order_and_drops_dead_sockets() -> None:
    hub = SessionWebSocketHub()
    live, dead = _FakeWebSocket(), _FakeWebSocket(broken=True)
    await hub.connect("s", live)
    await hub.connect("s", dead)
    assert live.accepted and dead.accepted

    sink = WebSocketSink(hub=hub, session_id="s")
    sink.show_hands("shaking")
    sink.play_sound("jokenpo_voice")
    sink.show_hands("open")
    await asyncio.sleep(0.01)

    assert [m["command"] for m in live.sent] == ["show_hands", "play_sound", "show_hands"]
    assert live.sent[-1]["state"] == "open"
    assert hub.connection_count("s") == 1

    await hub.broadcast("s", {"type": "ping"})
    assert live.sent[-1] == {"type": "ping"}


@pytest.mark.asyncio
async def test_hub_ignores_unknown_sessions() -> None:
    hub = SessionWebSocketHub()
    ws = _FakeWebSocket()
    await hub.connect("a", ws)
    await hub.broadcast("b", {"type": "ping"})
    await hub.disconnect("b", ws)
    assert ws.sent == []


@pytest.mark.asyncio
async def test_stalled_client_only_holds_up_its_own_session() -> None:
    hub = SessionWebSocketHub(send_timeout_s=0.05)
    stalled, live = _FakeWebSocket(stalled=True), _FakeWebSocket()
    await hub.connect("A", stalled)
    await hub.connect("B", live)

    hub.publish("A", {"type": "presentation", "command": "show_hands"})
    for i in range(50):
        hub.publish("B", {"type": "presentation", "n": i})
    await asyncio.sleep(0.02)

    assert [m["n"] for m in live.sent] == list(range(50))

    # The stalled socket times out and is dropped; nothing is left queued for it.
    await asyncio.sleep(0.1)
    assert hub.connection_count("A") == 0
    assert hub.connection_count("B") == 1
    hub.publish("A", {"type": "ping"})
    await asyncio.sleep(0)
    assert stalled.sent == []


@pytest.mark.asyncio
async def test_disconnecting_the_last_socket_forgets_the_session() -> None:
    hub = SessionWebSocketHub()
    ws = _FakeWebSocket()
    await hub.connect("s", ws)
    await hub.broadcast("s", {"type": "ping"})
    await hub.disconnect("s", ws)

    assert hub.connection_count("s") == 0
    await hub.broadcast("s", {"type": "ping"})
    assert ws.sent == [{"type": "ping"}]
