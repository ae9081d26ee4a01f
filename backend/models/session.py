from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .board import Cell, Mark, empty_board


class SessionStatus(str, Enum):
    WAITING = "waiting"        # fewer than two seats claimed, no moves yet
    ACTIVE = "active"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable copy of a session handed out by the store and the hub."""

    id: str
    board: tuple[Cell, ...]
    current_turn: Mark
    winner: Mark | None
    is_over: bool
    is_draw: bool
    x_joined: bool
    o_joined: bool

    @property
    def status(self) -> SessionStatus:
        if self.winner is not None:
            return SessionStatus.WON
        if self.is_draw:
            return SessionStatus.DRAW
        if not (self.x_joined and self.o_joined) and all(c is None for c in self.board):
            return SessionStatus.WAITING
        return SessionStatus.ACTIVE

    @property
    def move_count(self) -> int:
        return sum(1 for c in self.board if c is not None)


@dataclass
class GameSession:
    id: str
    board: list[Cell] = field(default_factory=empty_board)
    current_turn: Mark = Mark.X
    winner: Mark | None = None
    is_over: bool = False
    is_draw: bool = False
    x_joined: bool = False
    o_joined: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def seat_taken(self, mark: Mark) -> bool:
        return self.x_joined if mark is Mark.X else self.o_joined

    def claim(self, mark: Mark) -> None:
        if mark is Mark.X:
            self.x_joined = True
        else:
            self.o_joined = True

    def restart(self, *, clear_seats: bool = False) -> None:
        """Back to creation defaults; id (and seats unless asked) are kept."""
        self.board = empty_board()
        self.current_turn = Mark.X
        self.winner = None
        self.is_over = False
        self.is_draw = False
        if clear_seats:
            self.x_joined = False
            self.o_joined = False

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            id=self.id,
            board=tuple(self.board),
            current_turn=self.current_turn,
            winner=self.winner,
            is_over=self.is_over,
            is_draw=self.is_draw,
            x_joined=self.x_joined,
            o_joined=self.o_joined,
        )
