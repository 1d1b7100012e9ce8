"""WebSocket frame models.

Client → Server: a message envelope, or ``{"pong": ...}`` (no ``recipient``) acknowledging a probe.
Server → Client: a presence snapshot, a delivered message, or ``{"ping": true}``.
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import MalformedEnvelopeError
from direct_chat.domain.entities.message import Message


class Frame(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class FilePayload(Frame):
    name: str
    data: str  # base64, optionally prefixed with "data:<mime>;base64,"


class InboundEnvelope(Frame):
    recipient: UUID
    text: str | None = None
    file: FilePayload | None = None

    @model_validator(mode="after")
    def _has_content(self) -> InboundEnvelope:
        if self.text is not None and not self.text.strip():
            self.text = None
        if self.text is None and self.file is None:
            raise ValueError("envelope needs text or file")
        return self


class PongFrame(Frame):
    pong: Any = True


class PingFrame(Frame):
    ping: bool = True


class OnlineUser(Frame):
    user_id: UUID
    username: str


class PresenceFrame(Frame):
    online: list[OnlineUser]

    @classmethod
    def from_identities(cls, identities: list[Identity]) -> PresenceFrame:
        return cls(
            online=[OnlineUser(user_id=i.user_id, username=i.username) for i in identities]
        )


class DeliveryFrame(Frame):
    text: str | None
    sender: UUID
    recipient: UUID
    file: FilePayload | None
    id: UUID
    created_at: datetime

    @classmethod
    def for_message(cls, message: Message, file: FilePayload | None) -> DeliveryFrame:
        return cls(
            text=message.text,
            sender=message.sender,
            recipient=message.recipient,
            file=file,
            id=message.id,
            created_at=message.created_at,
        )


def parse_inbound(raw: str | bytes) -> InboundEnvelope | PongFrame:
    """Decode one client frame. Raises MalformedEnvelopeError."""
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise MalformedEnvelopeError(f"not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedEnvelopeError("frame must be a JSON object")
    if "pong" in data and "recipient" not in data:
        return PongFrame(pong=data["pong"])
    try:
        return InboundEnvelope.model_validate(data)
    except ValidationError as exc:
        raise MalformedEnvelopeError(str(exc)) from exc
