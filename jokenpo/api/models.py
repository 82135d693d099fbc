from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from jokenpo.config import ChantMode
from jokenpo.core.events import RoundResult, SpecialEvent
from jokenpo.core.moves import Move, Outcome
from jokenpo.fsm import RoundPhase
from jokenpo.session_store import GameSession


class SessionCreateRequest(BaseModel):
    # Fixes the opponent's moves and caption picks, for reproducible sessions.
    seed: int | None = Field(default=None, ge=1, le=2**31 - 1)


class PlayRequest(BaseModel):
    move: Move


class RoundResultModel(BaseModel):
    human_move: Move
    opponent_move: Move
    outcome: Outcome
    player_score: int
    opponent_score: int
    special_events: list[SpecialEvent]
    caption: str
    headline: str
    commentary: str
    completed_at: datetime

    @classmethod
    def from_result(cls, result: RoundResult) -> "RoundResultModel":
        return cls(
            human_move=result.human_move,
            opponent_move=result.opponent_move,
            outcome=result.outcome,
            player_score=result.score_after[0],
            opponent_score=result.score_after[1],
            special_events=list(result.special_events),
            caption=result.caption,
            headline=result.headline,
            commentary=result.commentary,
            completed_at=result.ts,
        )


class SessionState(BaseModel):
    session_id: UUID
    created_at: datetime
    seed: int

    player_score: int
    opponent_score: int
    busy: bool
    suspense_active: bool
    phase: RoundPhase

    music_on: bool
    chant_mode: ChantMode

    last_round: RoundResultModel | None = None

    @classmethod
    def from_session(cls, gs: GameSession) -> "SessionState":
        c = gs.controller
        return cls(
            session_id=gs.session_id,
            created_at=gs.created_at,
            seed=gs.seed,
            player_score=c.player_score,
            opponent_score=c.opponent_score,
            busy=c.busy,
            suspense_active=c.suspense_active,
            phase=c.phase,
            music_on=c.music_on,
            chant_mode=c.chant_mode,
            last_round=RoundResultModel.from_result(c.last_result) if c.last_result else None,
        )


class PlayResponse(BaseModel):
    # False when a round was already in flight; the request is dropped, not queued.
    accepted: bool
    state: SessionState


class SessionListResponse(BaseModel):
    sessions: list[SessionState]
