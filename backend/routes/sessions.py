"""Session REST API. Every mutating call broadcasts the new snapshot after the store returns."""

import logging

from fastapi import APIRouter, Body, Depends

from app.dependencies import get_hub, get_store
from models.errors import SessionNotFoundError
from routes.schemas import (
    CreateSessionRequest,
    ErrorResponse,
    GameStateResponse,
    JoinRequest,
    MoveRequest,
)
from services.broadcast_hub import BroadcastHub
from services.store import SessionStore

router = APIRouter(tags=["sessions"])
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "/sessions",
    response_model=GameStateResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
async def create_session(
    body: CreateSessionRequest | None = Body(default=None),
    store: SessionStore = Depends(get_store),
) -> GameStateResponse:
    """Create a session; the creator may claim a seat with {"player": "X"|"O"}."""
    player = body.player if body is not None else None
    snapshot = store.create(player)
    logger.info("[sessions] POST /sessions -> 201 session_id=%s player=%s", snapshot.id, player)
    return GameStateResponse.from_snapshot(snapshot)


@router.get(
    "/sessions/{session_id}",
    response_model=GameStateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
) -> GameStateResponse:
    snapshot = store.get(session_id)
    if snapshot is None:
        raise SessionNotFoundError(session_id)
    return GameStateResponse.from_snapshot(snapshot)


@router.post(
    "/sessions/{session_id}/join",
    response_model=GameStateResponse,
    responses=_ERROR_RESPONSES,
)
async def join_session(
    session_id: str,
    body: JoinRequest,
    store: SessionStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> GameStateResponse:
    snapshot = store.join(session_id, body.player)
    await hub.broadcast(session_id, snapshot)
    return GameStateResponse.from_snapshot(snapshot)


@router.post(
    "/sessions/{session_id}/moves",
    response_model=GameStateResponse,
    responses=_ERROR_RESPONSES,
)
async def make_move(
    session_id: str,
    body: MoveRequest,
    store: SessionStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> GameStateResponse:
    snapshot = store.apply_move(session_id, body.position, body.player)
    await hub.broadcast(session_id, snapshot)
    return GameStateResponse.from_snapshot(snapshot)


@router.post(
    "/sessions/{session_id}/reset",
    response_model=GameStateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reset_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> GameStateResponse:
    snapshot = store.reset(session_id)
    await hub.broadcast(session_id, snapshot)
    return GameStateResponse.from_snapshot(snapshot)
