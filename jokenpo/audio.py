from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from jokenpo.presentation import guarded


class Track(StrEnum):
    background = "bg_music"
    suspense_tie = "suspense_9x9"
    match_point_player = "suspense_user"
    match_point_opponent = "suspense_cpu"
    epic_win = "epic_win"
    game_over = "game_over"


class AudioTransport(Protocol):
    def play(self, track: Track) -> None: ...

    def pause(self, track: Track) -> None: ...

    def set_loop(self, track: Track, loop: bool) -> None: ...

    def seek(self, track: Track, t: float) -> None: ...

    def is_playing(self, track: Track) -> bool: ...


@dataclass(frozen=True, slots=True)
class AudioCall:
    op: str
    track: Track
    arg: str = ""

    def as_payload(self) -> dict[str, str]:
        return {"type": "audio", "op": self.op, "track": self.track.value, "arg": self.arg}


@dataclass(slots=True)
class InMemoryAudio:
    """Audio transport that keeps track state in memory.

    Every transport call is recorded in `calls` and forwarded to `on_call` (e.g. a websocket
    broadcaster) so a remote client can mirror playback.
    """

    on_call: Callable[[AudioCall], None] | None = None
    calls: list[AudioCall] = field(default_factory=list)
    _playing: set[Track] = field(default_factory=set)
    _looping: set[Track] = field(default_factory=set)
    _positions: dict[Track, float] = field(default_factory=dict)

    def _record(self, call: AudioCall) -> None:
        self.calls.append(call)
        if self.on_call is not None:
            self.on_call(call)

    def play(self, track: Track) -> None:
        self._playing.add(track)
        self._record(AudioCall("play", track))

    def pause(self, track: Track) -> None:
        self._playing.discard(track)
        self._record(AudioCall("pause", track))

    def set_loop(self, track: Track, loop: bool) -> None:
        if loop:
            self._looping.add(track)
        else:
            self._looping.discard(track)
        self._record(AudioCall("set_loop", track, str(loop).lower()))

    def seek(self, track: Track, t: float) -> None:
        self._positions[track] = t
        self._record(AudioCall("seek", track, f"{t:g}"))

    def is_playing(self, track: Track) -> bool:
        return track in self._playing

    def is_looping(self, track: Track) -> bool:
        return track in self._looping


class SafeAudio:
    """Failure-tolerant proxy: playback rejected by the host is a no-op."""

    def __init__(self, inner: AudioTransport) -> None:
        self.inner = inner

    def play(self, track: Track) -> None:
        guarded(self.inner.play, track, what=f"play({track})")

    def pause(self, track: Track) -> None:
        guarded(self.inner.pause, track, what=f"pause({track})")

    def set_loop(self, track: Track, loop: bool) -> None:
        guarded(self.inner.set_loop, track, loop, what=f"set_loop({track})")

    def seek(self, track: Track, t: float) -> None:
        guarded(self.inner.seek, track, t, what=f"seek({track})")

    def is_playing(self, track: Track) -> bool:
        return bool(guarded(self.inner.is_playing, track, what=f"is_playing({track})", default=False))

    def restart(self, track: Track) -> None:
        self.seek(track, 0)
        self.play(track)

    def stop(self, track: Track) -> None:
        self.pause(track)
        self.seek(track, 0)
