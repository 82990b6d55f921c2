"""
Cloud Functions entry point.

Deploy with `--entry-point honeycomb_sink_handler`; Eventarc pushes the
Pub/Sub CloudEvent to the function's "/" route.
"""
import functions_framework
from anyio import run
from cloudevents.http import CloudEvent

from services.honeycomb_sink.src.relay import handle
from services.honeycomb_sink.src.schemas import EventEnvelope


def envelope_from_cloud_event(cloud_event: CloudEvent) -> EventEnvelope:
    attrs = cloud_event.get_attributes()
    return EventEnvelope(
        id=attrs.get("id") or "",
        source=attrs.get("source") or "",
        type=attrs.get("type") or "",
        specversion=attrs.get("specversion") or "1.0",
        subject=attrs.get("subject"),
        time=attrs.get("time"),
        data=cloud_event.get_data(),
    )


@functions_framework.cloud_event
def honeycomb_sink_handler(cloud_event: CloudEvent) -> None:
    """Consume a CloudEvent and forward its Pub/Sub message data to Honeycomb."""
    run(handle, envelope_from_cloud_event(cloud_event))
