from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Protocol

from chatrelay.settings import settings

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class HubError(Exception):
    pass


class SubscriberClosed(HubError):
    """Raised when delivering to, or reading from, a closed subscriber."""


class Subscriber(Protocol):
    def deliver(self, message: str) -> None: ...


@dataclass(frozen=True)
class SubscriptionHandle:
    id: int


class QueueSubscriber:
    """Subscriber backed by a bounded asyncio.Queue.

    `deliver` never blocks. When the queue is full the oldest pending message
    is dropped so a slow reader cannot hold up publishers. Calls from threads
    other than the owning loop's are handed over with `call_soon_threadsafe`.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, message: str) -> None:
        if self._closed:
            raise SubscriberClosed("subscriber is closed")
        if self._on_own_loop():
            self._put(message)
        else:
            self._loop.call_soon_threadsafe(self._put, message)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Wake a reader blocked in get()
        if self._on_own_loop():
            self._put(None)
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._put, None)

    async def get(self, timeout: float | None = None) -> str | None:
        """Next message, or None when `timeout` passes without one."""
        if self._closed and self._queue.empty():
            raise SubscriberClosed("subscriber is closed")
        try:
            if timeout is None:
                item = await self._queue.get()
            else:
                item = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None
        if item is None:
            raise SubscriberClosed("subscriber is closed")
        return item

    def _on_own_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _put(self, item: str | None) -> None:
        try:
            self._queue.put_nowait(item)
        except asyncio.QueueFull:
            # Drop oldest item to make room
            self._queue.get_nowait()
            self.dropped += 1
            logger.warning("Subscriber queue full, dropped oldest message")
            self._queue.put_nowait(item)


class BroadcastHub:
    """Fans every published message out to all currently registered subscribers.

    A single lock serializes subscribe, unsubscribe and the snapshot taken by
    publish. Delivery itself runs outside the lock, so subscribers added while
    a publish is in flight do not receive that message.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.queue_size = queue_size
        self._subscribers: dict[int, Subscriber] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> SubscriptionHandle:
        with self._lock:
            handle = SubscriptionHandle(next(self._ids))
            self._subscribers[handle.id] = subscriber
            count = len(self._subscribers)
        logger.debug("Subscriber %s joined (%d active)", handle.id, count)
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        with self._lock:
            removed = self._subscribers.pop(handle.id, None)
            count = len(self._subscribers)
        if removed is not None:
            logger.debug("Subscriber %s left (%d active)", handle.id, count)

    def publish(self, message: str) -> int:
        with self._lock:
            targets = list(self._subscribers.items())

        delivered = 0
        for sub_id, subscriber in targets:
            try:
                subscriber.deliver(message)
            except Exception as exc:
                logger.warning("Dropping subscriber %s after failed delivery: %s", sub_id, exc)
                self.unsubscribe(SubscriptionHandle(sub_id))
            else:
                delivered += 1
        return delivered

    @contextmanager
    def listen(self, maxsize: int | None = None) -> Iterator[QueueSubscriber]:
        """Subscribe a fresh QueueSubscriber for the duration of the block."""
        subscriber = QueueSubscriber(maxsize or self.queue_size)
        handle = self.subscribe(subscriber)
        try:
            yield subscriber
        finally:
            self.unsubscribe(handle)
            subscriber.close()

    def close(self) -> None:
        """Close every subscriber and forget them all."""
        with self._lock:
            targets = list(self._subscribers.values())
            self._subscribers.clear()
        for subscriber in targets:
            close = getattr(subscriber, "close", None)
            if close is not None:
                close()
        if targets:
            logger.info("Closed %d subscriber(s)", len(targets))


hub = BroadcastHub(queue_size=settings.sse_queue_size)
