from __future__ import annotations

from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        sender=model.sender,
        recipient=model.recipient,
        text=model.text,
        file=model.file,
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        sender=entity.sender,
        recipient=entity.recipient,
        text=entity.text,
        file=entity.file,
        created_at=entity.created_at,
    )
