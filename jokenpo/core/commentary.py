from __future__ import annotations

from typing import Literal

from jokenpo.core.moves import Outcome
from jokenpo.core.rules import THRESHOLD_WIN

CommentTone = Literal["player", "opponent", "tie"]

DOMINANT_MARGIN = 4

PLAYER_CHAMPION_COMMENT = "🏆 Chegou a 10 vitórias primeiro! Que conquista!"
OPPONENT_CHAMPION_COMMENT = "💻 Ele chegou a 10 vitórias antes… revanche?"
DOMINANT_LEAD_COMMENT = "🔥 Placar: Estás dominando! Que sequência!"
DOMINANT_DEFICIT_COMMENT = "😞 Placar: Ele está te atropelando… tente virar o jogo!"
TIED_COMMENT = "⚖️ Placar: Tá tudo igual por enquanto..."
SLIGHT_LEAD_COMMENT = "😎 Placar: Você está na frente! Continue assim!"
SLIGHT_DEFICIT_COMMENT = "😞 Placar: Ele está ganhando… bora reagir!"


def comment(player_score: int, opponent_score: int, last_outcome: Outcome | None = None) -> str:
    """Score commentary appended to the round headline.

    Only the score pair drives the text; `last_outcome` is accepted so callers can pass the
    round they just resolved without branching on it.
    """

    diff = player_score - opponent_score

    if player_score >= THRESHOLD_WIN and player_score > opponent_score:
        return PLAYER_CHAMPION_COMMENT
    if opponent_score >= THRESHOLD_WIN and opponent_score > player_score:
        return OPPONENT_CHAMPION_COMMENT
    if diff >= DOMINANT_MARGIN:
        return DOMINANT_LEAD_COMMENT
    if diff <= -DOMINANT_MARGIN:
        return DOMINANT_DEFICIT_COMMENT
    if diff == 0:
        return TIED_COMMENT
    if diff > 0:
        return SLIGHT_LEAD_COMMENT
    return SLIGHT_DEFICIT_COMMENT


def comment_tone(player_score: int, opponent_score: int) -> CommentTone:
    if player_score > opponent_score:
        return "player"
    if opponent_score > player_score:
        return "opponent"
    return "tie"
