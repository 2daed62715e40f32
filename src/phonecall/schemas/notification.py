"""Notification record schema and its JSON wire codec.

Learn: The wire format is a compact JSON object sent as a single text
frame: {"name": "...", "company": "..."}. The server encodes a typed
record; the client decodes whatever JSON value arrives and forwards it
untouched, so decode_payload deliberately does not enforce the schema.
decode_record is there for consumers that want the typed model back.
"""

import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from phonecall.errors import DeserializationError, SerializationError


class NotificationRecord(BaseModel):
    name: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)

    model_config = {"extra": "forbid", "frozen": True}


def default_record() -> NotificationRecord:
    """Build the record configured for this deployment."""
    from phonecall.config import settings

    return NotificationRecord(name=settings.record_name, company=settings.record_company)


def encode_record(record: NotificationRecord) -> str:
    """Serialize a record to compact JSON text for one WebSocket text frame."""
    try:
        return record.model_dump_json()
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"Cannot encode notification record: {e}") from e


def decode_payload(frame: str | bytes) -> Any:
    """Parse an inbound frame as JSON.

    Binary frames are accepted if they hold UTF-8 text. Raises
    DeserializationError for anything that is not valid JSON.
    """
    if isinstance(frame, (bytes, bytearray)):
        try:
            frame = bytes(frame).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Frame is not UTF-8: {e}", frame) from e
    try:
        return json.loads(frame)
    except json.JSONDecodeError as e:
        raise DeserializationError(f"Frame is not valid JSON: {e}", frame) from e


def decode_record(frame: str | bytes) -> NotificationRecord:
    """Parse an inbound frame into a NotificationRecord."""
    value = decode_payload(frame)
    try:
        return NotificationRecord.model_validate(value)
    except ValidationError as e:
        raise DeserializationError(f"Frame is not a notification record: {e}", frame) from e
