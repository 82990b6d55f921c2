import base64
import binascii
import json
from typing import Any, Dict, Mapping

import httpx
from fastapi import APIRouter, HTTPException, Request, Response

from ..exceptions import RelayError
from ..logging import jlog
from ..relay import handle
from ..schemas import EventEnvelope

router = APIRouter()

STRUCTURED_CONTENT_TYPE = "application/cloudevents+json"
_CE_ATTRIBUTES = ("id", "source", "type", "specversion", "subject", "time")

def envelope_from_http(headers: Mapping[str, str], body: bytes) -> EventEnvelope:
    """
    Build an EventEnvelope from an Eventarc HTTP delivery.
    Binary mode carries attributes in ce-* headers and the data as the body;
    structured mode carries the whole event as a JSON object.
    """
    content_type = headers.get("content-type", "")
    if content_type.startswith(STRUCTURED_CONTENT_TYPE):
        try:
            event = json.loads(body)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid structured CloudEvent: {e}")
        if not isinstance(event, dict):
            raise HTTPException(status_code=400, detail="Structured CloudEvent must be a JSON object")
        fields: Dict[str, Any] = {k: event[k] for k in _CE_ATTRIBUTES if event.get(k) is not None}
        if "data_base64" in event:
            try:
                fields["data"] = base64.b64decode(event["data_base64"], validate=True)
            except (binascii.Error, TypeError) as e:
                raise HTTPException(status_code=400, detail=f"Invalid data_base64: {e}")
        else:
            fields["data"] = event.get("data")
        return EventEnvelope(**fields)

    fields = {k: headers[f"ce-{k}"] for k in _CE_ATTRIBUTES if f"ce-{k}" in headers}
    return EventEnvelope(data=body, **fields)

@router.post("/")
async def receive_event(request: Request):
    """
    Eventarc push target. 204 on success; any RelayError maps to a non-2xx so the
    trigger can redeliver.
    """
    envelope = envelope_from_http(request.headers, await request.body())
    jlog(event="cloud_event_received", ce_id=envelope.id, ce_type=envelope.type, ce_source=envelope.source)

    client: httpx.AsyncClient = request.app.state.httpx_client
    try:
        await handle(envelope, client=client)
    except RelayError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e

    return Response(status_code=204)
