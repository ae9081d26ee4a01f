from __future__ import annotations

import json
import logging
from typing import Any

import anyio
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.types import Message

from app.dependencies import get_hub, get_store
from models.errors import GameError, SessionNotFoundError
from models.session import GameSnapshot
from routes.schemas import MoveRequest, snapshot_payload
from services.broadcast_hub import BroadcastHub
from services.store import SessionStore

router = APIRouter(tags=["sessions"])
logger = logging.getLogger(__name__)

# Application-defined close code for an unknown session.
CLOSE_SESSION_NOT_FOUND = 4404


def decode_frame(message: Message) -> Any:
    """Parse a text or binary frame as JSON. Raises ValueError if it is neither."""
    text = message.get("text")
    if text is None:
        data = message.get("bytes")
        if data is None:
            raise ValueError("empty frame")
        text = data.decode("utf-8")
    return json.loads(text)


class WebSocketObserver:
    """Duplex observer: snapshots are written straight to the socket."""

    def __init__(self, websocket: WebSocket, session_id: str) -> None:
        self.websocket = websocket
        self.session_id = session_id

    async def send_snapshot(self, snapshot: GameSnapshot) -> None:
        await self.websocket.send_json(snapshot_payload(snapshot))

    async def send_error(self, message: str, code: str) -> None:
        await self.websocket.send_json({"error": message, "code": code})

    def __repr__(self) -> str:
        client = self.websocket.client
        return f"WebSocketObserver(session_id={self.session_id!r}, client={client})"


@router.websocket("/ws/sessions/{session_id}")
async def ws_session(
    websocket: WebSocket,
    session_id: str,
    store: SessionStore = Depends(get_store),
    hub: BroadcastHub = Depends(get_hub),
) -> None:
    """
    Two-way game socket.

    Server -> client: a snapshot on connect and after every change, or
      {"error": str, "code": str} when this client's frame is rejected.
    Client -> server: {"position": int, "player": "X"|"O"}
    """
    logger.info("[session_ws] Client connecting for session_id=%r", session_id)
    try:
        await websocket.accept()
    except Exception as e:
        logger.warning("[session_ws] accept() failed session_id=%r: %s", session_id, e)
        return

    observer = WebSocketObserver(websocket, session_id)
    await hub.register(session_id, observer)
    try:
        # Read after registering so no broadcast can land before a staler snapshot.
        snapshot = store.get(session_id)
        if snapshot is None:
            err = SessionNotFoundError(session_id)
            await observer.send_error(err.detail, err.code)
            await websocket.close(code=CLOSE_SESSION_NOT_FOUND)
            return
        await observer.send_snapshot(snapshot)

        while True:
            try:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
                move = MoveRequest.model_validate(decode_frame(message))
            except ValidationError as e:
                await observer.send_error(f"invalid move request: {e.error_count()} error(s)", "invalid_request")
                continue
            except ValueError:
                await observer.send_error("invalid JSON frame", "invalid_request")
                continue

            try:
                snapshot = store.apply_move(session_id, move.position, move.player)
            except GameError as e:
                await observer.send_error(e.detail, e.code)
                continue
            await hub.broadcast(session_id, snapshot)
    except WebSocketDisconnect:
        logger.info("[session_ws] Client disconnected session_id=%r", session_id)
    finally:
        with anyio.CancelScope(shield=True):
            await hub.unregister(session_id, observer)
