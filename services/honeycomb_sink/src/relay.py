from typing import Optional

import httpx
from opentelemetry import trace
from pydantic import ValidationError

from ..common.context import reset_message_id, set_message_id
from .config import HONEYCOMB_EVENTS_URL, HoneycombSettings, load_honeycomb_settings, service_settings
from .exceptions import (
    DecodeError,
    RelayError,
    RequestBuildError,
    ResponseReadError,
    TransportError,
)
from .logging import jlog
from .schemas import EventEnvelope, HoneycombResponse, MessagePublishedData

tracer = trace.get_tracer(__name__)


def decode_message(envelope: EventEnvelope) -> MessagePublishedData:
    """
    Validate the CloudEvent data into a MessagePublishedData and log what was received.
    A fresh instance per call; nothing is kept between invocations.
    """
    data = envelope.data
    try:
        if isinstance(data, (bytes, bytearray, str)):
            msg = MessagePublishedData.model_validate_json(data)
        else:
            msg = MessagePublishedData.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"invalid MessagePublishedData: {e}") from e

    jlog(event="pubsub_message_id", message_id=msg.message.messageId)
    jlog(event="pubsub_subscription", subscription=msg.subscription)
    jlog(event="pubsub_data", data=msg.message.data.decode("utf-8", errors="replace"))
    return msg


def events_url(dataset: str) -> str:
    # dataset comes from configuration and is appended as-is
    return HONEYCOMB_EVENTS_URL + dataset


async def send_to_honeycomb(
    msg: MessagePublishedData,
    settings: HoneycombSettings,
    client: httpx.AsyncClient,
) -> HoneycombResponse:
    try:
        request = client.build_request(
            "POST",
            events_url(settings.honeycomb_dataset),
            content=msg.message.data,
            headers={
                "Content-Type": "application/json",
                "X-Honeycomb-Team": settings.honeycomb_api_key.get_secret_value(),
            },
        )
    except (httpx.InvalidURL, ValueError) as e:
        # ValueError covers UnicodeEncodeError from non-ASCII header values
        raise RequestBuildError(f"could not build Honeycomb request: {e}") from e

    try:
        resp = await client.send(request, stream=True)
    except httpx.RequestError as e:
        raise TransportError(f"Honeycomb request failed: {e}") from e

    # Status code is not inspected: a 4xx/5xx with a readable body is a success
    try:
        await resp.aread()
    except httpx.HTTPError as e:
        raise ResponseReadError(f"could not read Honeycomb response: {e}") from e
    finally:
        await resp.aclose()

    jlog(event="honeycomb_response", status_code=resp.status_code, body=resp.text)
    return HoneycombResponse(status_code=resp.status_code, body=resp.text)


async def handle(
    envelope: EventEnvelope,
    *,
    settings: Optional[HoneycombSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> HoneycombResponse:
    """
    Relay one CloudEvent-wrapped Pub/Sub message to Honeycomb.

    Configuration is checked before anything else, then the envelope is decoded and
    its data POSTed unchanged. Any failure raises a RelayError subclass; there are
    no retries, redelivery belongs to the trigger.
    """
    token = set_message_id(None)
    try:
        with tracer.start_as_current_span("honeycomb.forward") as span:
            try:
                if settings is None:
                    settings = load_honeycomb_settings()
                span.set_attribute("honeycomb.dataset", settings.honeycomb_dataset)

                msg = decode_message(envelope)
                set_message_id(msg.message.messageId)
                span.set_attribute("messaging.message.id", msg.message.messageId)

                if client is not None:
                    return await send_to_honeycomb(msg, settings, client)
                async with httpx.AsyncClient(timeout=service_settings.honeycomb_timeout_s) as own_client:
                    return await send_to_honeycomb(msg, settings, own_client)
            except RelayError as e:
                jlog(event="relay_failed", severity="ERROR", step=e.step, error=str(e), ce_id=envelope.id)
                raise
    finally:
        reset_message_id(token)
