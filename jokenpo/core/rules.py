from __future__ import annotations

from typing import Literal

THRESHOLD_WIN = 10
THRESHOLD_TIE = THRESHOLD_WIN - 1

Side = Literal["player", "opponent"]
Standing = Literal["winner", "loser", "tie"]


def is_sudden_death_tie(player_score: int, opponent_score: int) -> bool:
    return player_score == THRESHOLD_TIE and opponent_score == THRESHOLD_TIE


def standings(player_score: int, opponent_score: int) -> dict[Side, Standing]:
    """Scoreboard highlight for each side, derived from the score pair only."""

    if player_score > opponent_score:
        return {"player": "winner", "opponent": "loser"}
    if opponent_score > player_score:
        return {"player": "loser", "opponent": "winner"}
    return {"player": "tie", "opponent": "tie"}
