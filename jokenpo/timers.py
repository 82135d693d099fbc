from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    def after(self, delay_ms: int, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioTimer:
    """Schedules continuations on the asyncio event loop.

    The loop is resolved lazily so a controller can be built outside of a running loop
    (e.g. at import time) and still schedule onto the loop that serves requests.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def after(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0) / 1000, callback)
