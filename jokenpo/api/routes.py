from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
import redis

from jokenpo.api.deps import get_redis, get_registry
from jokenpo.api.models import PlayRequest, PlayResponse, SessionCreateRequest, SessionListResponse, SessionState
from jokenpo.config import ChantMode
from jokenpo.core.moves import Move
from jokenpo.session_store import GameSession, SessionRegistry
from jokenpo.streams import Outbox, read_outbox

router = APIRouter()


def _require(registry: SessionRegistry, session_id: UUID) -> GameSession:
    try:
        return registry.require(session_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.websocket("/ws/session/{session_id}")
async def session_updates_ws(
    websocket: WebSocket,
    session_id: UUID,
    registry: SessionRegistry = Depends(get_registry),
) -> None:
    sid = str(session_id)
    await registry.hub.connect(sid, websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await registry.hub.disconnect(sid, websocket)
    except Exception:
        await registry.hub.disconnect(sid, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/session", response_model=SessionState, status_code=status.HTTP_201_CREATED)
async def create_session_route(
    payload: SessionCreateRequest | None = None,
    registry: SessionRegistry = Depends(get_registry),
    r: redis.Redis = Depends(get_redis),
) -> SessionState:
    gs = registry.create(r=r, seed=payload.seed if payload else None)
    return SessionState.from_session(gs)


@router.get("/session", response_model=SessionListResponse)
async def list_sessions_route(registry: SessionRegistry = Depends(get_registry)) -> SessionListResponse:
    return SessionListResponse(sessions=[SessionState.from_session(gs) for gs in registry.list_sessions()])


@router.get("/session/{session_id}", response_model=SessionState)
async def get_session_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> SessionState:
    return SessionState.from_session(_require(registry, session_id))


@router.delete("/session/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> None:
    _require(registry, session_id)
    registry.discard(session_id)


@router.post("/session/{session_id}/play", response_model=PlayResponse)
async def play_route(
    session_id: UUID,
    payload: PlayRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> PlayResponse:
    gs = _require(registry, session_id)
    accepted = gs.controller.play_round(payload.move)
    return PlayResponse(accepted=accepted, state=SessionState.from_session(gs))


@router.post("/session/{session_id}/reset", response_model=SessionState)
async def reset_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> SessionState:
    gs = _require(registry, session_id)
    gs.controller.reset()
    return SessionState.from_session(gs)


@router.post("/session/{session_id}/music/toggle", response_model=SessionState)
async def toggle_music_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> SessionState:
    gs = _require(registry, session_id)
    gs.controller.toggle_music()
    return SessionState.from_session(gs)


@router.post("/session/{session_id}/chant/toggle")
async def toggle_chant_route(session_id: UUID, registry: SessionRegistry = Depends(get_registry)) -> dict[str, str]:
    gs = _require(registry, session_id)
    mode: ChantMode = gs.controller.toggle_chant_mode()
    return {"session_id": str(session_id), "chant_mode": mode.value}


@router.post("/session/{session_id}/preview/{move}", status_code=status.HTTP_204_NO_CONTENT)
async def preview_move_route(session_id: UUID, move: Move, registry: SessionRegistry = Depends(get_registry)) -> None:
    _require(registry, session_id).controller.preview_move(move)


@router.get("/session/{session_id}/outbox")
async def get_outbox_route(
    session_id: UUID,
    count: int = 20,
    start: str = "-",
    end: str = "+",
    registry: SessionRegistry = Depends(get_registry),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    """Debug endpoint: read a session's presentation Redis Stream.

    Intended for local/dev testing when redis-cli isn't available.
    """

    _require(registry, session_id)
    if count < 1 or count > 200:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 200")

    outbox = Outbox(session_id=str(session_id))
    try:
        messages = read_outbox(r=r, outbox=outbox, start=start, end=end, count=count)
    except redis.RedisError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    return {"session_id": str(session_id), "stream": outbox.key, "messages": messages}
