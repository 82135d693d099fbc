from __future__ import annotations

from enum import StrEnum


class Move(StrEnum):
    rock = "rock"
    paper = "paper"
    scissors = "scissors"


class Outcome(StrEnum):
    draw = "draw"
    player_wins = "player_wins"
    opponent_wins = "opponent_wins"


MOVES: tuple[Move, ...] = (Move.rock, Move.paper, Move.scissors)

GLYPHS: dict[Move, str] = {
    Move.rock: "✊",
    Move.paper: "✋",
    Move.scissors: "✌️",
}

# (winner, loser) pairs.
_BEATS: frozenset[tuple[Move, Move]] = frozenset(
    {
        (Move.rock, Move.scissors),
        (Move.paper, Move.rock),
        (Move.scissors, Move.paper),
    }
)

_SHORTHAND: dict[str, Move] = {"r": Move.rock, "p": Move.paper, "s": Move.scissors}


def resolve(human: Move, opponent: Move) -> Outcome:
    if human == opponent:
        return Outcome.draw
    return Outcome.player_wins if (human, opponent) in _BEATS else Outcome.opponent_wins


def is_valid_move(value: object) -> bool:
    try:
        parse_move(value)
    except ValueError:
        return False
    return True


def parse_move(value: object) -> Move:
    """Coerce user input into a Move.

    Accepts a Move, its value ("rock") or the one-letter shorthand ("r"), case-insensitive.
    Raises ValueError for anything else.
    """

    if isinstance(value, Move):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid move: {value!r}")

    key = value.strip().casefold()
    if key in _SHORTHAND:
        return _SHORTHAND[key]
    try:
        return Move(key)
    except ValueError as e:
        raise ValueError(f"Invalid move: {value!r} (expected rock|paper|scissors)") from e
