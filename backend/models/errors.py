"""Typed failures raised by the session store. All are caller errors."""

from __future__ import annotations

from typing import Any


class GameError(Exception):
    code = "game_error"
    message = "game error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class SessionNotFoundError(GameError):
    code = "not_found"

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"game not found: {session_id}")


class InvalidMarkError(GameError):
    code = "invalid_mark"
    message = "invalid player, must be X or O"

    def __init__(self, value: Any = None) -> None:
        self.value = value
        super().__init__()


class InvalidPositionError(GameError):
    code = "invalid_position"

    def __init__(self, position: Any) -> None:
        self.position = position
        super().__init__(f"invalid move: position must be 0-8, got {position!r}")


class SeatTakenError(GameError):
    code = "seat_taken"
    message = "that player slot is already taken"


class SessionFullError(GameError):
    code = "session_full"
    message = "game is full, already has two players"


class GameOverError(GameError):
    code = "game_over"
    message = "game is over"


class PositionTakenError(GameError):
    code = "position_taken"
    message = "position already taken"


class NotYourTurnError(GameError):
    code = "not_your_turn"
    message = "not your turn"
