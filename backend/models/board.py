from __future__ import annotations

from enum import Enum
from typing import Sequence

from .errors import InvalidMarkError

BOARD_SIZE = 9

# Rows, columns, diagonals.
WIN_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Mark(str, Enum):
    X = "X"
    O = "O"  # noqa: E741

    @property
    def other(self) -> Mark:
        return Mark.O if self is Mark.X else Mark.X


Cell = Mark | None


def empty_board() -> list[Cell]:
    return [None] * BOARD_SIZE


def winner(board: Sequence[Cell]) -> Mark | None:
    """Return the mark holding any complete line, or None."""
    for a, b, c in WIN_LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a]
    return None


def is_full(board: Sequence[Cell]) -> bool:
    return all(cell is not None for cell in board)


def parse_mark(value: Mark | str | None) -> Mark:
    """
    Coerce a request value into a Mark.

    Accepts a Mark or its string form ("x", " O ", ...); anything else is
    an InvalidMarkError.
    """
    if isinstance(value, Mark):
        return value
    if isinstance(value, str):
        try:
            return Mark(value.strip().upper())
        except ValueError:
            pass
    raise InvalidMarkError(value)
