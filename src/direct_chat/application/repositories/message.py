from __future__ import annotations

from typing import Protocol
from uuid import UUID

from direct_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_between(self, user_a: UUID, user_b: UUID) -> list[Message]:
        """Messages exchanged by the two users, oldest first."""
        ...


class MessageWriter(Protocol):
    async def append(
        self,
        sender: UUID,
        recipient: UUID,
        text: str | None,
        file: str | None,
    ) -> Message:
        """Insert a message, assigning its id and created_at. Raises PersistenceError."""
        ...
