from .board import BOARD_SIZE, WIN_LINES, Cell, Mark, empty_board, is_full, parse_mark, winner
from .errors import (
    GameError,
    GameOverError,
    InvalidMarkError,
    InvalidPositionError,
    NotYourTurnError,
    PositionTakenError,
    SeatTakenError,
    SessionFullError,
    SessionNotFoundError,
)
from .session import GameSession, GameSnapshot, SessionStatus

__all__ = [
    "BOARD_SIZE",
    "WIN_LINES",
    "Cell",
    "Mark",
    "empty_board",
    "is_full",
    "parse_mark",
    "winner",
    "GameError",
    "GameOverError",
    "InvalidMarkError",
    "InvalidPositionError",
    "NotYourTurnError",
    "PositionTakenError",
    "SeatTakenError",
    "SessionFullError",
    "SessionNotFoundError",
    "GameSession",
    "GameSnapshot",
    "SessionStatus",
]
