from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    """A persisted direct message. ``file`` is the server-side attachment name."""

    id: UUID
    sender: UUID
    recipient: UUID
    text: str | None
    file: str | None
    created_at: datetime
