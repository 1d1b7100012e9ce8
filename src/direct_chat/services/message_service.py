from __future__ import annotations

from uuid import UUID

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import NotFoundError
from direct_chat.application.uow import UnitOfWork
from direct_chat.domain.entities.message import Message


async def send_message(
    sender: Identity,
    recipient: UUID,
    text: str | None,
    file: str | None,
    uow: UnitOfWork,
) -> Message:
    """Append a message to the store and commit. Raises PersistenceError."""
    msg = await uow.messages_w.append(sender.user_id, recipient, text, file)
    await uow.commit()
    return msg


async def list_conversation(
    principal: Identity,
    other_user_id: UUID,
    uow: UnitOfWork,
) -> list[Message]:
    if await uow.users.get_by_id(other_user_id) is None:
        raise NotFoundError(f"User {other_user_id} not found")
    return await uow.messages.list_between(principal.user_id, other_user_id)
