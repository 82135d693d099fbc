from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Literal, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

HandState = Literal["closed", "shaking", "open"]
BubbleSide = Literal["player", "opponent"]

CommandKind = Literal[
    "show_hands",
    "show_bubble",
    "show_scene",
    "play_sound",
    "show_caption",
    "show_headline",
    "highlight_score",
]


class PresentationSink(Protocol):
    """Declarative rendering target. Owns no game logic."""

    def show_hands(self, state: HandState) -> None: ...

    def show_bubble(self, side: BubbleSide, text: str, tag: str | None = None) -> None: ...

    def show_scene(self, category: str, image: str) -> None: ...

    def play_sound(self, name: str) -> None: ...

    def show_caption(self, text: str, tag: str | None = None) -> None: ...

    def show_headline(self, text: str) -> None: ...

    def highlight_score(self, side: BubbleSide, tag: str) -> None: ...


@dataclass(frozen=True, slots=True)
class PresentationCommand:
    kind: CommandKind
    fields: dict[str, str]

    def as_payload(self) -> dict[str, str]:
        return {"type": "presentation", "command": self.kind, **self.fields}


class CommandSink:
    """Turns every sink call into a PresentationCommand handed to `emit`.

    Subclasses only decide where commands go.
    """

    def emit(self, command: PresentationCommand) -> None:
        raise NotImplementedError

    def _send(self, kind: CommandKind, **fields: str | None) -> None:
        self.emit(PresentationCommand(kind=kind, fields={k: v or "" for k, v in fields.items()}))

    def show_hands(self, state: HandState) -> None:
        self._send("show_hands", state=state)

    def show_bubble(self, side: BubbleSide, text: str, tag: str | None = None) -> None:
        self._send("show_bubble", side=side, text=text, tag=tag)

    def show_scene(self, category: str, image: str) -> None:
        self._send("show_scene", category=category, image=image)

    def play_sound(self, name: str) -> None:
        self._send("play_sound", name=name)

    def show_caption(self, text: str, tag: str | None = None) -> None:
        self._send("show_caption", text=text, tag=tag)

    def show_headline(self, text: str) -> None:
        self._send("show_headline", text=text)

    def highlight_score(self, side: BubbleSide, tag: str) -> None:
        self._send("highlight_score", side=side, tag=tag)


class NullSink(CommandSink):
    def emit(self, command: PresentationCommand) -> None:
        return None


@dataclass(slots=True)
class RecordingSink(CommandSink):
    commands: list[PresentationCommand] = field(default_factory=list)

    def emit(self, command: PresentationCommand) -> None:
        self.commands.append(command)

    def kinds(self) -> list[CommandKind]:
        return [c.kind for c in self.commands]

    def of_kind(self, kind: CommandKind) -> list[PresentationCommand]:
        return [c for c in self.commands if c.kind == kind]

    def clear(self) -> None:
        self.commands.clear()


@dataclass(slots=True)
class CallbackSink(CommandSink):
    callback: Callable[[PresentationCommand], None]

    def emit(self, command: PresentationCommand) -> None:
        self.callback(command)


class FanoutSink(CommandSink):
    """Forward each command to several sinks; one failing target does not starve the others."""

    def __init__(self, sinks: Iterable[CommandSink]) -> None:
        self.sinks = tuple(sinks)

    def emit(self, command: PresentationCommand) -> None:
        for sink in self.sinks:
            guarded(sink.emit, command, what=f"{type(sink).__name__}.emit")


def guarded(fn: Callable[..., T], *args: object, what: str, default: T | None = None) -> T | None:
    """Call a collaborator, logging and swallowing any failure.

    Rendering and audio targets may be missing or rejected by host policy; those calls are
    fire-and-forget and must never abort the round state machine.
    """

    try:
        return fn(*args)
    except Exception:
        logger.warning("presentation call failed: %s", what, exc_info=True)
        return default


class SafeSink:
    """Failure-tolerant proxy around any PresentationSink."""

    def __init__(self, inner: PresentationSink) -> None:
        self.inner = inner

    def show_hands(self, state: HandState) -> None:
        guarded(self.inner.show_hands, state, what="show_hands")

    def show_bubble(self, side: BubbleSide, text: str, tag: str | None = None) -> None:
        guarded(self.inner.show_bubble, side, text, tag, what="show_bubble")

    def show_scene(self, category: str, image: str) -> None:
        guarded(self.inner.show_scene, category, image, what="show_scene")

    def play_sound(self, name: str) -> None:
        guarded(self.inner.play_sound, name, what="play_sound")

    def show_caption(self, text: str, tag: str | None = None) -> None:
        guarded(self.inner.show_caption, text, tag, what="show_caption")

    def show_headline(self, text: str) -> None:
        guarded(self.inner.show_headline, text, what="show_headline")

    def highlight_score(self, side: BubbleSide, tag: str) -> None:
        guarded(self.inner.highlight_score, side, tag, what="highlight_score")
