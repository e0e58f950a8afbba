"""Incoming SMS domain model."""

from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
    """A raw text message as delivered by the message source."""

    model_config = ConfigDict(frozen=True)

    id: str
    address: str
    body: str
    timestamp_ms: int
