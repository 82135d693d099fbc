from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum


class ChantMode(StrEnum):
    voice = "voice"
    hands = "hands"


CHANT_SOUNDS: dict[ChantMode, str] = {
    ChantMode.voice: "jokenpo_voice",
    ChantMode.hands: "jokenpo_hands",
}

DEFAULT_REVEAL_DELAY_MS = 1800


@dataclass(frozen=True, slots=True)
class GameSettings:
    # Single pause between the shaking phase and the reveal.
    reveal_delay_ms: int = DEFAULT_REVEAL_DELAY_MS
    chant_mode: ChantMode = ChantMode.voice
    # Whether the host has background music switched on when a session starts.
    music_on: bool = False
    # Raise on internal-consistency faults instead of logging and resyncing.
    strict_invariants: bool = __debug__


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().casefold()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def settings_from_env() -> GameSettings:
    raw_delay = os.environ.get("JOKENPO_REVEAL_DELAY_MS", str(DEFAULT_REVEAL_DELAY_MS))
    try:
        delay = int(raw_delay)
    except ValueError as e:
        raise ValueError(f"JOKENPO_REVEAL_DELAY_MS must be an integer, got {raw_delay!r}") from e
    if delay < 0:
        raise ValueError("JOKENPO_REVEAL_DELAY_MS must be >= 0")

    raw_mode = os.environ.get("JOKENPO_CHANT_MODE", ChantMode.voice.value)
    try:
        chant_mode = ChantMode(raw_mode.strip().casefold())
    except ValueError as e:
        raise ValueError(f"JOKENPO_CHANT_MODE must be voice|hands, got {raw_mode!r}") from e

    return GameSettings(
        reveal_delay_ms=delay,
        chant_mode=chant_mode,
        music_on=_env_bool("JOKENPO_MUSIC_ON", False),
        strict_invariants=_env_bool("JOKENPO_STRICT_INVARIANTS", __debug__),
    )
