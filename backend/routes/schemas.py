"""Wire models shared by the REST, WebSocket and server-push adapters."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.board import Mark
from models.session import GameSnapshot, SessionStatus


class GameStateResponse(BaseModel):
    """Session snapshot as sent over every transport (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    board: list[Mark | None] = Field(min_length=9, max_length=9)
    current_turn: Mark
    winner: Mark | None = None
    is_over: bool
    is_draw: bool
    player_x_joined: bool
    player_o_joined: bool
    status: SessionStatus

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> GameStateResponse:
        return cls(
            id=snapshot.id,
            board=list(snapshot.board),
            current_turn=snapshot.current_turn,
            winner=snapshot.winner,
            is_over=snapshot.is_over,
            is_draw=snapshot.is_draw,
            player_x_joined=snapshot.x_joined,
            player_o_joined=snapshot.o_joined,
            status=snapshot.status,
        )


def snapshot_payload(snapshot: GameSnapshot) -> dict[str, Any]:
    return GameStateResponse.from_snapshot(snapshot).model_dump(mode="json", by_alias=True)


class CreateSessionRequest(BaseModel):
    player: str | None = None


class JoinRequest(BaseModel):
    player: str


class MoveRequest(BaseModel):
    position: int
    player: str


class ErrorResponse(BaseModel):
    detail: str
    code: str
