from __future__ import annotations

import logging

import fakeredis
import pytest

from jokenpo.audio import AudioCall, InMemoryAudio, SafeAudio, Track
from jokenpo.presentation import CallbackSink, FanoutSink, PresentationCommand, RecordingSink, SafeSink
from jokenpo.streams import Outbox, RedisStreamSink, publish_to_outbox, read_outbox

from conftest import FailingAudio, FailingSink


class _BrokenSink(RecordingSink):
    def emit(self, command: PresentationCommand) -> None:
        raise RuntimeError("renderer gone")


def test_recording_sink_turns_calls_into_commands() -> None:
    sink = RecordingSink()
    sink.show_bubble("player", "✊")
    sink.highlight_score("opponent", "winner")

    assert sink.kinds() == ["show_bubble", "highlight_score"]
    assert sink.commands[0].fields == {"side": "player", "text": "✊", "tag": ""}
    assert sink.commands[1].as_payload() == {
        "type": "presentation",
        "command": "highlight_score",
        "side": "opponent",
        "tag": "winner",
    }


def test_safe_sink_swallows_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    sink = SafeSink(FailingSink())  # type: ignore[arg-type]
    with caplog.at_level(logging.WARNING, logger="jokenpo.presentation"):
        sink.show_headline("Empate!")
    assert "show_headline" in caplog.text


def test_fanout_keeps_going_after_a_failing_sink() -> None:
    good = RecordingSink()
    seen: list[PresentationCommand] = []
    fan = FanoutSink([_BrokenSink(), good, CallbackSink(seen.append)])

    fan.play_sound("win")

    assert good.kinds() == ["play_sound"]
    assert [c.fields for c in seen] == [{"name": "win"}]


def test_safe_audio_treats_blocked_playback_as_silence() -> None:
    audio = SafeAudio(FailingAudio())
    audio.restart(Track.epic_win)
    assert audio.is_playing(Track.epic_win) is False


def test_in_memory_audio_forwards_calls() -> None:
    forwarded: list[AudioCall] = []
    audio = InMemoryAudio(on_call=forwarded.append)
    SafeAudio(audio).stop(Track.match_point_player)

    assert forwarded == [AudioCall("pause", Track.match_point_player), AudioCall("seek", Track.match_point_player, "0")]
    assert forwarded[1].as_payload() == {"type": "audio", "op": "seek", "track": "suspense_user", "arg": "0"}


def test_outbox_publish_and_read() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    outbox = Outbox(session_id="s1")
    assert outbox.key == "presentation:s1"

    publish_to_outbox(r=r, outbox=outbox, fields={"type": "presentation", "command": "show_hands", "state": "open"})
    publish_to_outbox(r=r, outbox=outbox, fields={"type": "presentation", "command": "play_sound", "name": "draw"})

    messages = read_outbox(r=r, outbox=outbox, count=1)
    assert len(messages) == 1
    assert messages[0]["fields"] == {"type": "presentation", "command": "show_hands", "state": "open"}
    assert len(read_outbox(r=r, outbox=outbox)) == 2


def test_redis_stream_sink_writes_commands_and_audio() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    sink = RedisStreamSink(r=r, session_id="s2")

    sink.show_scene("win", "win_1.png")
    sink.emit_audio(AudioCall("set_loop", Track.suspense_tie, "true"))

    fields = [f for _, f in r.xrange("presentation:s2")]
    assert fields == [
        {"type": "presentation", "command": "show_scene", "category": "win", "image": "win_1.png"},
        {"type": "audio", "op": "set_loop", "track": "suspense_9x9", "arg": "true"},
    ]
