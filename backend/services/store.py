"""In-memory session store. Keyed by session ID, one lock per store."""

from __future__ import annotations

import logging
import secrets
import threading

from models.board import BOARD_SIZE, Mark, is_full, parse_mark, winner
from models.errors import (
    GameOverError,
    InvalidMarkError,
    InvalidPositionError,
    NotYourTurnError,
    PositionTakenError,
    SeatTakenError,
    SessionFullError,
    SessionNotFoundError,
)
from models.session import GameSession, GameSnapshot

logger = logging.getLogger(__name__)

# Avoid 0/O, 1/I/l in session IDs so shared links don't get misread.
SESSION_ALPHABET = "23456789abcdefghjkmnpqrstuvwxyz"
DEFAULT_ID_LENGTH = 12


class SessionStore:
    """
    Owns every GameSession in the process.

    All operations run under a single store-wide lock, so validation and
    mutation of a move happen as one unit. Only GameSnapshot copies leave
    the store; callers broadcast them after the lock is released.
    """

    def __init__(
        self,
        *,
        reset_clears_seats: bool = False,
        id_length: int = DEFAULT_ID_LENGTH,
    ) -> None:
        if id_length < 4:
            raise ValueError("id_length must be at least 4")
        self._lock = threading.Lock()
        self._sessions: dict[str, GameSession] = {}
        self._reset_clears_seats = reset_clears_seats
        self._id_length = id_length

    @property
    def reset_clears_seats(self) -> bool:
        return self._reset_clears_seats

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def _new_id(self) -> str:
        # Caller holds the lock.
        while True:
            session_id = "".join(secrets.choice(SESSION_ALPHABET) for _ in range(self._id_length))
            if session_id not in self._sessions:
                return session_id

    def _require(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def create(self, mark: Mark | str | None = None) -> GameSnapshot:
        """
        Create a session; the creator optionally claims a seat.

        Never fails: an unrecognized creator mark claims no seat.
        """
        creator: Mark | None = None
        if mark is not None:
            try:
                creator = parse_mark(mark)
            except InvalidMarkError:
                logger.debug("[store] Ignoring unrecognized creator mark: %r", mark)
        with self._lock:
            session = GameSession(id=self._new_id())
            if creator is not None:
                session.claim(creator)
            self._sessions[session.id] = session
            snapshot = session.snapshot()
        logger.info("[store] Session created: session_id=%s creator=%s", snapshot.id, creator)
        return snapshot

    def join(self, session_id: str, mark: Mark | str | None) -> GameSnapshot:
        with self._lock:
            session = self._require(session_id)
            seat = parse_mark(mark)
            if session.seat_taken(seat):
                raise SeatTakenError()
            if session.x_joined and session.o_joined:
                raise SessionFullError()
            session.claim(seat)
            snapshot = session.snapshot()
        logger.info("[store] Seat claimed: session_id=%s mark=%s", session_id, seat.value)
        return snapshot

    def get(self, session_id: str) -> GameSnapshot | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.snapshot() if session is not None else None

    def apply_move(self, session_id: str, position: int, mark: Mark | str | None) -> GameSnapshot:
        """
        Validate and apply one move.

        Checks run in order: unknown session, finished game, position out of
        range, occupied cell, malformed mark, wrong turn. Nothing is written
        unless every check passes.
        """
        with self._lock:
            session = self._require(session_id)
            if session.is_over:
                raise GameOverError()
            if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < BOARD_SIZE:
                raise InvalidPositionError(position)
            if session.board[position] is not None:
                raise PositionTakenError()
            player = parse_mark(mark)
            if player is not session.current_turn:
                raise NotYourTurnError()

            session.board[position] = player
            won_by = winner(session.board)
            if won_by is not None:
                session.winner = won_by
                session.is_over = True
            elif is_full(session.board):
                session.is_draw = True
                session.is_over = True
            else:
                session.current_turn = player.other
            snapshot = session.snapshot()

        logger.debug("[store] Move applied: session_id=%s mark=%s position=%d", session_id, player.value, position)
        if snapshot.is_over:
            logger.info(
                "[store] Game over: session_id=%s winner=%s draw=%s",
                session_id,
                snapshot.winner.value if snapshot.winner else None,
                snapshot.is_draw,
            )
        return snapshot

    def reset(self, session_id: str) -> GameSnapshot:
        with self._lock:
            session = self._require(session_id)
            session.restart(clear_seats=self._reset_clears_seats)
            snapshot = session.snapshot()
        logger.info(
            "[store] Session reset: session_id=%s seats_cleared=%s",
            session_id,
            self._reset_clears_seats,
        )
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
