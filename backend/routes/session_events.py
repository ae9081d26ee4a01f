from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

import anyio
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.dependencies import get_hub, get_store
from models.errors import SessionNotFoundError
from models.session import GameSnapshot
from routes.schemas import ErrorResponse, snapshot_payload
from services.broadcast_hub import BroadcastHub, PushSubscription
from services.store import SessionStore

router = APIRouter(tags=["sessions"])
logger = logging.getLogger(__name__)

EVENT_NAME = "game-update"


def format_event(snapshot: GameSnapshot, event: str = EVENT_NAME) -> str:
    data = json.dumps(snapshot_payload(snapshot), separators=(",", ":"))
    return f"event: {event}\ndata: {data}\n\n"


async def game_event_stream(
    initial: GameSnapshot,
    subscription: PushSubscription,
    hub: BroadcastHub,
) -> AsyncIterator[str]:
    """
    Yield the current snapshot, then every snapshot delivered to the subscription.

    Ends when the subscription is closed; the subscription is always
    unregistered on exit, including when the client disconnects.
    """
    session_id = subscription.session_id
    try:
        yield format_event(initial)
        async for snapshot in subscription:
            yield format_event(snapshot)
    finally:
        with anyio.CancelScope(shield=True):
            await hub.unregister(session_id, subscription)
        logger.info(
            "[session_events] Stream closed session_id=%s dropped=%d",
            session_id,
            subscription.dropped,
        )


@router.get(
    "/sessions/{session_id}/events",
    response_class=StreamingResponse,
    responses={404: {"model": ErrorResponse}},
)
async def session_events(
    session_id: str,
    store: SessionStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> StreamingResponse:
    """Server-sent events: one `game-update` event per snapshot."""
    subscription = await hub.subscribe(session_id)
    snapshot = store.get(session_id)
    if snapshot is None:
        await hub.unregister(session_id, subscription)
        raise SessionNotFoundError(session_id)
    logger.info("[session_events] Subscribed session_id=%s", session_id)
    return StreamingResponse(
        game_event_stream(snapshot, subscription, hub),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
