from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, cast

import redis

from jokenpo.audio import AudioCall
from jokenpo.presentation import CommandSink, PresentationCommand

# Keep the outbox bounded; renderers only care about recent commands.
OUTBOX_MAXLEN = 1000


@dataclass(frozen=True, slots=True)
class Outbox:
    session_id: str

    @property
    def key(self) -> str:
        return f"presentation:{self.session_id}"


def publish_to_outbox(*, r: redis.Redis, outbox: Outbox, fields: Mapping[str, str]) -> str:
    """Append an entry to a session's presentation stream."""

    stream_id = r.xadd(
        outbox.key,
        {str(k): str(v) for k, v in fields.items()},
        maxlen=OUTBOX_MAXLEN,
        approximate=True,
    )
    return cast(str, stream_id)


def drop_outbox(*, r: redis.Redis, outbox: Outbox) -> None:
    r.delete(outbox.key)


def read_outbox(*, r: redis.Redis, outbox: Outbox, start: str = "-", end: str = "+", count: int = 20) -> list[dict[str, object]]:
    entries = r.xrange(outbox.key, min=start, max=end, count=count)
    return [{"id": mid, "fields": fields} for mid, fields in entries]


class RedisStreamSink(CommandSink):
    """Mirror presentation commands (and audio transport calls) into a Redis stream."""

    def __init__(self, *, r: redis.Redis, session_id: str) -> None:
        self.r = r
        self.outbox = Outbox(session_id=session_id)

    def emit(self, command: PresentationCommand) -> None:
        publish_to_outbox(r=self.r, outbox=self.outbox, fields=command.as_payload())

    def emit_audio(self, call: AudioCall) -> None:
        publish_to_outbox(r=self.r, outbox=self.outbox, fields=call.as_payload())
