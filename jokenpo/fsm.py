from __future__ import annotations

from enum import StrEnum

from statemachine import State, StateMachine


class RoundPhase(StrEnum):
    idle = "idle"
    shaking = "shaking"
    revealing = "revealing"
    resolving = "resolving"


class RoundFSM(StateMachine):
    """Phases of a single round.

    idle -> shaking -> revealing -> resolving -> idle

    The controller performs the work of each phase; the FSM only guards the order of
    transitions. `abort` returns an in-flight round to idle (used by reset).
    """

    idle = State(RoundPhase.idle.value, value=RoundPhase.idle.value, initial=True)
    shaking = State(RoundPhase.shaking.value, value=RoundPhase.shaking.value)
    revealing = State(RoundPhase.revealing.value, value=RoundPhase.revealing.value)
    resolving = State(RoundPhase.resolving.value, value=RoundPhase.resolving.value)

    begin = idle.to(shaking)
    reveal = shaking.to(revealing)
    resolve = revealing.to(resolving)
    settle = resolving.to(idle)
    abort = shaking.to(idle) | revealing.to(idle) | resolving.to(idle)

    @property
    def phase(self) -> RoundPhase:
        return RoundPhase(str(self.current_state_value))

    @property
    def in_flight(self) -> bool:
        return self.phase != RoundPhase.idle
