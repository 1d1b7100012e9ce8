from __future__ import annotations

from datetime import datetime
from uuid import UUID

from direct_chat.api.v1.schemas.common import CamelModel


class MessageResponse(CamelModel):
    id: UUID
    sender: UUID
    recipient: UUID
    text: str | None
    file: str | None
    created_at: datetime
