from __future__ import annotations

import pytest
from fastapi import FastAPI

from app.config import Settings
from app.main import create_app
from services.broadcast_hub import BroadcastHub
from services.store import SessionStore


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Fresh application (own store and hub) per test."""
    return create_app(settings)


@pytest.fixture
def store(app: FastAPI) -> SessionStore:
    return app.state.store


@pytest.fixture
def hub(app: FastAPI) -> BroadcastHub:
    return app.state.hub


@pytest.fixture
def anyio_backend() -> str:
    """The server runs on asyncio (uvicorn); run anyio-marked tests there."""
    return "asyncio"
