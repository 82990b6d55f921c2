import base64
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class EventEnvelope(BaseModel):
    """CloudEvent as handed to the relay; `data` is raw JSON or an already parsed mapping."""
    id: str = ""
    source: str = ""
    type: str = ""
    specversion: str = "1.0"
    subject: Optional[str] = None
    time: Optional[str] = None
    data: Any = None


class PubSubMessage(BaseModel):
    # https://cloud.google.com/pubsub/docs/reference/rest/v1/PubsubMessage
    data: bytes = b""  # base64 on the wire, decoded here
    messageId: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)
    publishTime: Optional[datetime] = None  # RFC3339
    orderingKey: str = ""

    @field_validator("data", mode="before")
    @classmethod
    def _b64decode(cls, v):
        if v is None:
            return b""
        if isinstance(v, (str, bytes)):
            return base64.b64decode(v, validate=True)
        return v

    @field_validator("attributes", mode="before")
    @classmethod
    def _null_attributes(cls, v):
        return {} if v is None else v


class MessagePublishedData(BaseModel):
    # https://cloud.google.com/eventarc/docs/cloudevents#pubsub
    message: PubSubMessage
    subscription: str = ""

    @model_validator(mode="before")
    @classmethod
    def _bare_message(cls, v):
        # Push subscriptions without the Eventarc wrapper deliver the PubsubMessage itself
        if isinstance(v, dict) and "message" not in v and ("data" in v or "messageId" in v):
            return {"message": v}
        return v


class HoneycombResponse(BaseModel):
    status_code: int
    body: str
