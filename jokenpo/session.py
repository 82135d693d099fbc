from __future__ import annotations

from dataclasses import dataclass

from jokenpo.core.moves import Outcome
from jokenpo.core.rules import is_sudden_death_tie


class InvariantViolation(AssertionError):
    """Internal-consistency fault in the session state."""


@dataclass(slots=True)
class Session:
    """In-memory state of one match.

    Scores only move through `award` and `reset`; the round controller owns `busy` and the
    suspense manager owns `suspense_active`.
    """

    _player_score: int = 0
    _opponent_score: int = 0
    busy: bool = False
    suspense_active: bool = False

    @classmethod
    def with_score(cls, player_score: int, opponent_score: int) -> "Session":
        if player_score < 0 or opponent_score < 0:
            raise ValueError("Scores must be non-negative")
        return cls(_player_score=player_score, _opponent_score=opponent_score)

    @property
    def player_score(self) -> int:
        return self._player_score

    @property
    def opponent_score(self) -> int:
        return self._opponent_score

    @property
    def score(self) -> tuple[int, int]:
        return self._player_score, self._opponent_score

    @property
    def is_sudden_death_tie(self) -> bool:
        return is_sudden_death_tie(self._player_score, self._opponent_score)

    def award(self, outcome: Outcome) -> None:
        if outcome == Outcome.player_wins:
            self._player_score += 1
        elif outcome == Outcome.opponent_wins:
            self._opponent_score += 1

    def reset(self) -> None:
        self._player_score = 0
        self._opponent_score = 0
        self.busy = False

    def violations(self, *, before: tuple[int, int] | None = None) -> list[str]:
        """Describe broken invariants (empty when consistent).

        `before` is the score pair at round start; a round may add at most one point in total.
        """

        problems: list[str] = []
        if self._player_score < 0 or self._opponent_score < 0:
            problems.append(f"negative score {self.score}")
        if self.suspense_active != self.is_sudden_death_tie:
            problems.append(f"suspense_active={self.suspense_active} with score {self.score}")
        if before is not None:
            dp = self._player_score - before[0]
            do = self._opponent_score - before[1]
            if dp < 0 or do < 0 or dp + do > 1:
                problems.append(f"score moved from {before} to {self.score}")
        return problems
