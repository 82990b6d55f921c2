import base64
import json

import httpx
import pytest

from services.honeycomb_sink.src.schemas import EventEnvelope

@pytest.fixture
def anyio_backend():
    return "asyncio"

@pytest.fixture
def honeycomb_env(monkeypatch):
    monkeypatch.setenv("HONEYCOMB_DATASET", "pubsub-events")
    monkeypatch.setenv("HONEYCOMB_API_KEY", "test-write-key")

@pytest.fixture
def no_honeycomb_env(monkeypatch):
    monkeypatch.delenv("HONEYCOMB_DATASET", raising=False)
    monkeypatch.delenv("HONEYCOMB_API_KEY", raising=False)

def pubsub_payload(data: bytes, message_id: str = "123", subscription: str = "projects/p/subscriptions/s") -> dict:
    return {
        "message": {
            "data": base64.b64encode(data).decode("ascii"),
            "messageId": message_id,
            "attributes": {},
            "publishTime": "2024-05-01T12:00:00.000Z",
            "orderingKey": "",
        },
        "subscription": subscription,
    }

def make_envelope(data: bytes = b"hello", message_id: str = "123") -> EventEnvelope:
    return EventEnvelope(
        id="ce-1",
        source="//pubsub.googleapis.com/projects/p/topics/t",
        type="google.cloud.pubsub.topic.v1.messagePublished",
        data=json.dumps(pubsub_payload(data, message_id)).encode("utf-8"),
    )

class Recorder:
    """MockTransport handler that keeps every request it sees."""

    def __init__(self, status_code: int = 200, body: bytes = b"{}"):
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body)

@pytest.fixture
def recorder():
    return Recorder()

@pytest.fixture
def mock_client(recorder):
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder))
