from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum

from jokenpo.core.moves import Move, Outcome
from jokenpo.core.rules import THRESHOLD_TIE, THRESHOLD_WIN, is_sudden_death_tie


class SpecialEvent(StrEnum):
    none = "none"
    player_match_point = "player_match_point"
    opponent_match_point = "opponent_match_point"
    sudden_death_tie = "sudden_death_tie"
    player_champion = "player_champion"
    opponent_champion = "opponent_champion"


CHAMPION_EVENTS = frozenset({SpecialEvent.player_champion, SpecialEvent.opponent_champion})


def special_events(player_score: int, opponent_score: int) -> tuple[SpecialEvent, ...]:
    """Threshold events for a score pair, in evaluation order.

    Derived from the score state, not from the outcome of the round that produced it.
    """

    events: list[SpecialEvent] = []

    if is_sudden_death_tie(player_score, opponent_score):
        events.append(SpecialEvent.sudden_death_tie)
    elif player_score == THRESHOLD_TIE and opponent_score < THRESHOLD_TIE:
        events.append(SpecialEvent.player_match_point)
    elif opponent_score == THRESHOLD_TIE and player_score < THRESHOLD_TIE:
        events.append(SpecialEvent.opponent_match_point)

    if player_score == THRESHOLD_WIN and player_score > opponent_score:
        events.append(SpecialEvent.player_champion)
    elif opponent_score == THRESHOLD_WIN and opponent_score > player_score:
        events.append(SpecialEvent.opponent_champion)

    return tuple(events) or (SpecialEvent.none,)


@dataclass(frozen=True, slots=True)
class RoundResult:
    human_move: Move
    opponent_move: Move
    outcome: Outcome
    score_after: tuple[int, int]
    special_events: tuple[SpecialEvent, ...]
    caption: str
    headline: str
    commentary: str
    ts: datetime

    @staticmethod
    def now(
        *,
        human_move: Move,
        opponent_move: Move,
        outcome: Outcome,
        score_after: tuple[int, int],
        special_events: tuple[SpecialEvent, ...],
        caption: str = "",
        headline: str = "",
        commentary: str = "",
    ) -> "RoundResult":
        return RoundResult(
            human_move=human_move,
            opponent_move=opponent_move,
            outcome=outcome,
            score_after=score_after,
            special_events=special_events,
            caption=caption,
            headline=headline,
            commentary=commentary,
            ts=datetime.now(timezone.utc),
        )
