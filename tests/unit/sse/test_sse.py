import pytest

from chatrelay.sse import CONNECTED
from chatrelay.sse import PING
from chatrelay.sse import event_stream
from chatrelay.sse import format_event


def test_format_single_line():
    assert format_event("hi") == "data: hi\n\n"


def test_format_multi_line_keeps_one_event():
    assert format_event("one\ntwo") == "data: one\ndata: two\n\n"


def test_format_empty_message():
    assert format_event("") == "data: \n\n"


@pytest.mark.asyncio
async def test_stream_relays_published_messages(hub, fake_request):
    with hub.listen() as subscriber:
        stream = event_stream(subscriber, fake_request.is_disconnected, keepalive=1)
        assert await stream.__anext__() == CONNECTED

        hub.publish("hello")
        hub.publish("world")

        assert await stream.__anext__() == "data: hello\n\n"
        assert await stream.__anext__() == "data: world\n\n"


@pytest.mark.asyncio
async def test_stream_pings_when_idle(hub, fake_request):
    with hub.listen() as subscriber:
        stream = event_stream(subscriber, fake_request.is_disconnected, keepalive=0.01)
        await stream.__anext__()

        assert await stream.__anext__() == PING


@pytest.mark.asyncio
async def test_stream_ends_on_disconnect(hub, fake_request):
    with hub.listen() as subscriber:
        stream = event_stream(subscriber, fake_request.is_disconnected, keepalive=1)
        await stream.__anext__()

        fake_request.disconnected = True
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()


@pytest.mark.asyncio
async def test_stream_ends_when_hub_closes(hub, fake_request):
    with hub.listen() as subscriber:
        stream = event_stream(subscriber, fake_request.is_disconnected, keepalive=1)
        await stream.__anext__()

        hub.close()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
