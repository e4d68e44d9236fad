from __future__ import annotations

from typing import AsyncIterator, Awaitable, Callable

from chatrelay.hub import QueueSubscriber
from chatrelay.hub import SubscriberClosed

PING = ": ping\n\n"
CONNECTED = ": connected\n\n"


def format_event(data: str) -> str:
    """Frame `data` as one SSE event, one `data:` field per line."""
    lines = data.splitlines() or [""]
    return "".join(f"data: {ln}\n" for ln in lines) + "\n"


async def event_stream(
    subscriber: QueueSubscriber,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = 15.0,
) -> AsyncIterator[str]:
    yield CONNECTED
    while True:
        if await is_disconnected():
            break
        try:
            message = await subscriber.get(timeout=keepalive)
        except SubscriberClosed:
            break
        if message is None:
            yield PING
        else:
            yield format_event(message)
