import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings
from models.errors import (
    GameError,
    SeatTakenError,
    SessionFullError,
    SessionNotFoundError,
)
from routes import session_events, session_ws, sessions
from services.broadcast_hub import BroadcastHub
from services.store import SessionStore

logger = logging.getLogger(__name__)


def error_status(exc: GameError) -> int:
    if isinstance(exc, SessionNotFoundError):
        return 404
    if isinstance(exc, (SeatTakenError, SessionFullError)):
        return 409
    return 400


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    status_code = error_status(exc)
    logger.info(
        "[app] %s %s -> %d %s: %s",
        request.method,
        request.url.path,
        status_code,
        exc.code,
        exc.detail,
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.detail, "code": exc.code})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app with its own store and hub. Run with `uvicorn app.main:create_app --factory`."""
    settings = settings or Settings.from_env()

    app = FastAPI(title="Tic-Tac-Toe Live API", version="0.1.0")
    app.state.settings = settings
    app.state.store = SessionStore(
        reset_clears_seats=settings.reset_clears_seats,
        id_length=settings.session_id_length,
    )
    app.state.hub = BroadcastHub(push_buffer_size=settings.push_buffer_size)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GameError, game_error_handler)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(sessions.router, prefix="/api")
    app.include_router(session_events.router, prefix="/api")
    app.include_router(session_ws.router, prefix="/api")
    return app

