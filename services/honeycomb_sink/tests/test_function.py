import httpx
import pytest
from cloudevents.http import CloudEvent

from services.honeycomb_sink import function
from services.honeycomb_sink.src.exceptions import DecodeError

from conftest import Recorder, pubsub_payload

ATTRIBUTES = {
    "id": "evt-1",
    "type": "google.cloud.pubsub.topic.v1.messagePublished",
    "source": "//pubsub.googleapis.com/projects/p/topics/t",
}

def test_envelope_from_cloud_event():
    event = CloudEvent(ATTRIBUTES, pubsub_payload(b"hello"))

    envelope = function.envelope_from_cloud_event(event)

    assert envelope.id == "evt-1"
    assert envelope.source == ATTRIBUTES["source"]
    assert envelope.specversion == "1.0"
    assert envelope.data["message"]["data"] == "aGVsbG8="

def test_handler_runs_relay(monkeypatch):
    seen = []

    async def fake_handle(envelope):
        seen.append(envelope)

    monkeypatch.setattr(function, "handle", fake_handle)

    function.honeycomb_sink_handler(CloudEvent(ATTRIBUTES, pubsub_payload(b"hello")))

    assert len(seen) == 1
    assert seen[0].type == ATTRIBUTES["type"]

def test_handler_propagates_errors(monkeypatch):
    async def failing_handle(envelope):
        raise DecodeError("invalid MessagePublishedData: bad")

    monkeypatch.setattr(function, "handle", failing_handle)

    with pytest.raises(DecodeError):
        function.honeycomb_sink_handler(CloudEvent(ATTRIBUTES, {"message": 1}))

def test_handler_forwards_event_data(monkeypatch, honeycomb_env):
    recorder = Recorder(status_code=200, body=b"{}")
    real_client = httpx.AsyncClient

    def patched_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(recorder)
        return real_client(*args, **kwargs)

    monkeypatch.setattr("services.honeycomb_sink.src.relay.httpx.AsyncClient", patched_client)
    raw = b'{"name": "span", "duration_ms": 12}\n'

    function.honeycomb_sink_handler(CloudEvent(ATTRIBUTES, pubsub_payload(raw)))

    assert len(recorder.requests) == 1
    assert recorder.requests[0].content == raw
    assert recorder.requests[0].headers["X-Honeycomb-Team"] == "test-write-key"
    assert recorder.requests[0].url.path == "/1/events/pubsub-events"
