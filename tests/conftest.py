import os

# Minimal values for tests
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("SSE_KEEPALIVE_SECONDS", "0.05")

from httpx import ASGITransport
from httpx import AsyncClient
import pytest

from chatrelay.app import app
from chatrelay.hub import BroadcastHub
from chatrelay.hub import hub as app_hub


class RecordingSubscriber:
    def __init__(self):
        self.received = []

    def deliver(self, message):
        self.received.append(message)


class BrokenSubscriber:
    def __init__(self):
        self.attempts = 0

    def deliver(self, message):
        self.attempts += 1
        raise ConnectionResetError("connection lost")


class FakeRequest:
    """Just enough of a Request for the stream route."""

    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


@pytest.fixture
def hub():
    return BroadcastHub(queue_size=4)


@pytest.fixture
def recorder():
    return RecordingSubscriber


@pytest.fixture
def broken():
    return BrokenSubscriber()


@pytest.fixture
def fake_request():
    return FakeRequest()


# ---- Leave the app's shared hub empty between tests ----
@pytest.fixture(autouse=True)
def reset_app_hub():
    yield
    app_hub.close()


# ---- HTTP client bound to the ASGI app ----
@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
