"""FastAPI dependencies handing the app-owned store and hub to routers."""

from fastapi.requests import HTTPConnection

from services.broadcast_hub import BroadcastHub
from services.store import SessionStore


def get_store(conn: HTTPConnection) -> SessionStore:
    return conn.app.state.store


def get_hub(conn: HTTPConnection) -> BroadcastHub:
    return conn.app.state.hub
