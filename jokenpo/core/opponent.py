from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Protocol

from jokenpo.core.moves import MOVES, Move


class MoveGenerator(Protocol):
    def generate(self) -> Move:  # pragma: no cover
        ...


@dataclass(slots=True)
class RandomOpponent:
    """Uniform, memoryless pick among the three moves."""

    rng: random.Random = field(default_factory=random.Random)

    def generate(self) -> Move:
        return self.rng.choice(MOVES)
