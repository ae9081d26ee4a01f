"""Tests for the session REST API: create, read, join, move, reset."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI

from services.broadcast_hub import BroadcastHub
from services.store import SessionStore


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create(client: httpx.AsyncClient, player: str | None = None) -> dict:
    body = {"player": player} if player else None
    response = await client.post("/api/sessions", json=body)
    assert response.status_code == 201
    return response.json()


async def _move(client: httpx.AsyncClient, session_id: str, position: int, player: str) -> httpx.Response:
    return await client.post(
        f"/api/sessions/{session_id}/moves",
        json={"position": position, "player": player},
    )


@pytest.mark.anyio
async def test_create_session_returns_wire_snapshot(client: httpx.AsyncClient, store: SessionStore) -> None:
    body = await _create(client)
    assert set(body) == {
        "id",
        "board",
        "currentTurn",
        "winner",
        "isOver",
        "isDraw",
        "playerXJoined",
        "playerOJoined",
        "status",
    }
    assert body["board"] == [None] * 9
    assert body["currentTurn"] == "X"
    assert body["winner"] is None
    assert body["isOver"] is False
    assert body["status"] == "waiting"
    assert body["id"] in store


@pytest.mark.anyio
async def test_create_session_with_creator_seat(client: httpx.AsyncClient) -> None:
    body = await _create(client, "O")
    assert body["playerOJoined"] is True
    assert body["playerXJoined"] is False


@pytest.mark.anyio
@pytest.mark.parametrize("player", ["Z", ""])
async def test_create_session_with_unknown_creator_claims_no_seat(client: httpx.AsyncClient, player: str) -> None:
    response = await client.post("/api/sessions", json={"player": player})
    assert response.status_code == 201
    body = response.json()
    assert body["playerXJoined"] is False
    assert body["playerOJoined"] is False
    assert body["status"] == "waiting"


@pytest.mark.anyio
async def test_get_session(client: httpx.AsyncClient) -> None:
    created = await _create(client)
    response = await client.get(f"/api/sessions/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.anyio
async def test_get_session_returns_404_when_missing(client: httpx.AsyncClient) -> None:
    response = await client.get("/api/sessions/nonexistent")
    assert response.status_code == 404
    assert response.json() == {"detail": "game not found: nonexistent", "code": "not_found"}


@pytest.mark.anyio
async def test_join_then_join_same_seat_conflicts(client: httpx.AsyncClient) -> None:
    created = await _create(client, "X")
    joined = await client.post(f"/api/sessions/{created['id']}/join", json={"player": "O"})
    assert joined.status_code == 200
    assert joined.json()["playerOJoined"] is True
    assert joined.json()["status"] == "active"

    again = await client.post(f"/api/sessions/{created['id']}/join", json={"player": "X"})
    assert again.status_code == 409
    assert again.json() == {"detail": "that player slot is already taken", "code": "seat_taken"}


@pytest.mark.anyio
async def test_join_missing_session(client: httpx.AsyncClient) -> None:
    response = await client.post("/api/sessions/nonexistent/join", json={"player": "X"})
    assert response.status_code == 404


@pytest.mark.anyio
async def test_move_sequence_to_win(client: httpx.AsyncClient) -> None:
    session_id = (await _create(client))["id"]
    for position, player in [(0, "X"), (3, "O"), (1, "X"), (4, "O")]:
        assert (await _move(client, session_id, position, player)).status_code == 200

    final = (await _move(client, session_id, 2, "X")).json()
    assert final["board"] == ["X", "X", "X", "O", "O", None, None, None, None]
    assert final["winner"] == "X"
    assert final["isOver"] is True
    assert final["isDraw"] is False
    assert final["status"] == "won"

    late = await _move(client, session_id, 5, "O")
    assert late.status_code == 400
    assert late.json()["code"] == "game_over"


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("position", "player", "code"),
    [
        (9, "X", "invalid_position"),
        (-1, "X", "invalid_position"),
        (0, "O", "not_your_turn"),
        (0, "Q", "invalid_mark"),
    ],
)
async def test_rejected_moves_map_to_400(
    client: httpx.AsyncClient, position: int, player: str, code: str
) -> None:
    created = await _create(client)
    response = await _move(client, created["id"], position, player)
    assert response.status_code == 400
    assert response.json()["code"] == code
    assert (await client.get(f"/api/sessions/{created['id']}")).json() == created


@pytest.mark.anyio
async def test_move_on_taken_position(client: httpx.AsyncClient) -> None:
    session_id = (await _create(client))["id"]
    await _move(client, session_id, 4, "X")
    response = await _move(client, session_id, 4, "O")
    assert response.status_code == 400
    assert response.json()["code"] == "position_taken"


@pytest.mark.anyio
async def test_malformed_move_body_is_422(client: httpx.AsyncClient) -> None:
    session_id = (await _create(client))["id"]
    response = await client.post(f"/api/sessions/{session_id}/moves", json={"player": "X"})
    assert response.status_code == 422


@pytest.mark.anyio
async def test_reset_clears_board_and_keeps_id(client: httpx.AsyncClient) -> None:
    session_id = (await _create(client, "X"))["id"]
    await _move(client, session_id, 0, "X")
    response = await client.post(f"/api/sessions/{session_id}/reset")
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == session_id
    assert body["board"] == [None] * 9
    assert body["currentTurn"] == "X"
    assert body["playerXJoined"] is True


@pytest.mark.anyio
async def test_reset_missing_session(client: httpx.AsyncClient) -> None:
    response = await client.post("/api/sessions/nonexistent/reset")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_mutations_are_broadcast_to_session_observers(
    client: httpx.AsyncClient, hub: BroadcastHub
) -> None:
    session_id = (await _create(client, "X"))["id"]
    other_id = (await _create(client))["id"]
    sub = await hub.subscribe(session_id)
    other_sub = await hub.subscribe(other_id)

    await client.post(f"/api/sessions/{session_id}/join", json={"player": "O"})
    await _move(client, session_id, 4, "X")
    await _move(client, session_id, 4, "O")  # rejected, not broadcast
    await client.post(f"/api/sessions/{session_id}/reset")

    joined, moved, reset = await sub.get(), await sub.get(), await sub.get()
    assert joined.o_joined is True
    assert moved.board[4] == "X"
    assert reset.board == (None,) * 9
    assert sub.pending == 0
    assert other_sub.pending == 0
