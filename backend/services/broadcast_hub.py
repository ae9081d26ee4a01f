from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Protocol

from models.session import GameSnapshot

logger = logging.getLogger(__name__)

DEFAULT_PUSH_BUFFER_SIZE = 10


class DuplexObserver(Protocol):
    """A two-way connection (e.g. a WebSocket) that receives snapshots inline."""

    async def send_snapshot(self, snapshot: GameSnapshot) -> None: ...


class PushSubscription:
    """
    One-way subscriber backed by a bounded asyncio.Queue.

    offer() never blocks: when the buffer is full the new snapshot is
    dropped for this subscriber. close() ends async iteration once the
    consumer reaches the close marker.
    """

    def __init__(self, session_id: str, maxsize: int = DEFAULT_PUSH_BUFFER_SIZE) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")
        self.session_id = session_id
        self._queue: asyncio.Queue[GameSnapshot | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def offer(self, snapshot: GameSnapshot) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(snapshot)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug(
                "[hub] Push buffer full; dropped update session_id=%s dropped=%d",
                self.session_id,
                self.dropped,
            )
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Make room for the close marker so a blocked consumer always wakes up.
        if self._queue.full():
            try:
                _ = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                pass
        self._queue.put_nowait(None)

    async def get(self) -> GameSnapshot | None:
        """Next snapshot, or None once the subscription is closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def __aiter__(self) -> PushSubscription:
        return self

    async def __anext__(self) -> GameSnapshot:
        snapshot = await self.get()
        if snapshot is None:
            raise StopAsyncIteration
        return snapshot


Observer = DuplexObserver | PushSubscription


class BroadcastHub:
    """
    In-memory fan-out of session snapshots to live observers.

    - Duplex observers get an inline send_snapshot(); a failing peer is
      logged and skipped, its owner is expected to unregister it.
    - Push subscriptions get a non-blocking offer() on a bounded queue.
    The hub never reads from or writes to the session store.
    """

    def __init__(self, push_buffer_size: int = DEFAULT_PUSH_BUFFER_SIZE) -> None:
        self._lock = asyncio.Lock()
        self._observers: dict[str, set[Observer]] = defaultdict(set)
        self._push_buffer_size = push_buffer_size

    async def register(self, session_id: str, observer: Observer) -> None:
        async with self._lock:
            self._observers[session_id].add(observer)
        logger.debug("[hub] Registered %s for session_id=%s", type(observer).__name__, session_id)

    async def unregister(self, session_id: str, observer: Observer) -> None:
        async with self._lock:
            observers = self._observers.get(session_id)
            if observers:
                observers.discard(observer)
                if not observers:
                    self._observers.pop(session_id, None)
        if isinstance(observer, PushSubscription):
            observer.close()
        logger.debug("[hub] Unregistered %s for session_id=%s", type(observer).__name__, session_id)

    async def subscribe(self, session_id: str) -> PushSubscription:
        subscription = PushSubscription(session_id, maxsize=self._push_buffer_size)
        await self.register(session_id, subscription)
        return subscription

    async def observer_count(self, session_id: str) -> int:
        async with self._lock:
            return len(self._observers.get(session_id, ()))

    async def broadcast(self, session_id: str, snapshot: GameSnapshot) -> int:
        """Deliver snapshot to every observer of session_id; returns successful deliveries."""
        async with self._lock:
            targets = list(self._observers.get(session_id, set()))
        if not targets:
            return 0

        delivered = 0
        duplex: list[DuplexObserver] = []
        for observer in targets:
            if isinstance(observer, PushSubscription):
                if observer.offer(snapshot):
                    delivered += 1
            else:
                duplex.append(observer)

        for observer in duplex:
            try:
                await observer.send_snapshot(snapshot)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "[hub] Delivery failed session_id=%s observer=%r: %s",
                    session_id,
                    observer,
                    exc,
                )
                continue
            delivered += 1

        logger.debug(
            "[hub] Broadcast session_id=%s delivered=%d/%d",
            session_id,
            delivered,
            len(targets),
        )
        return delivered
