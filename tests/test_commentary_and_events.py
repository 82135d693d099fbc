from __future__ import annotations

import pytest

from jokenpo.core import commentary
from jokenpo.core.commentary import comment, comment_tone
from jokenpo.core.events import SpecialEvent, special_events
from jokenpo.core.moves import Outcome
from jokenpo.core.rules import standings


@pytest.mark.parametrize(
    ("player", "opponent", "expected"),
    [
        (10, 8, commentary.PLAYER_CHAMPION_COMMENT),
        (10, 2, commentary.PLAYER_CHAMPION_COMMENT),
        (7, 10, commentary.OPPONENT_CHAMPION_COMMENT),
        (6, 2, commentary.DOMINANT_LEAD_COMMENT),
        (1, 5, commentary.DOMINANT_DEFICIT_COMMENT),
        (0, 0, commentary.TIED_COMMENT),
        (9, 9, commentary.TIED_COMMENT),
        (3, 1, commentary.SLIGHT_LEAD_COMMENT),
        (4, 7, commentary.SLIGHT_DEFICIT_COMMENT),
    ],
)
def test_comment_branches(player: int, opponent: int, expected: str) -> None:
    assert comment(player, opponent) == expected


def test_comment_ignores_last_outcome() -> None:
    assert comment(2, 1, Outcome.opponent_wins) == comment(2, 1, Outcome.player_wins)


def test_comment_tone_follows_leader() -> None:
    assert comment_tone(3, 1) == "player"
    assert comment_tone(1, 3) == "opponent"
    assert comment_tone(2, 2) == "tie"


@pytest.mark.parametrize(
    ("player", "opponent", "expected"),
    [
        (0, 0, (SpecialEvent.none,)),
        (1, 0, (SpecialEvent.none,)),
        (9, 9, (SpecialEvent.sudden_death_tie,)),
        (9, 5, (SpecialEvent.player_match_point,)),
        (9, 6, (SpecialEvent.player_match_point,)),
        (4, 9, (SpecialEvent.opponent_match_point,)),
        (10, 8, (SpecialEvent.player_champion,)),
        (10, 9, (SpecialEvent.player_champion,)),
        (9, 10, (SpecialEvent.opponent_champion,)),
        (11, 9, (SpecialEvent.none,)),
    ],
)
def test_special_events_are_derived_from_the_score(
    player: int, opponent: int, expected: tuple[SpecialEvent, ...]
) -> None:
    assert special_events(player, opponent) == expected


def test_standings() -> None:
    assert standings(2, 1) == {"player": "winner", "opponent": "loser"}
    assert standings(1, 2) == {"player": "loser", "opponent": "winner"}
    assert standings(4, 4) == {"player": "tie", "opponent": "tie"}
