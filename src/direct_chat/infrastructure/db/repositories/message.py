from __future__ import annotations

import uuid
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from direct_chat.application.exceptions import PersistenceError
from direct_chat.application.ports.clock import Clock
from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.db.mappers import message as mapper
from direct_chat.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_between(self, user_a: UUID, user_b: UUID) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(MessageModel.sender == user_a, MessageModel.recipient == user_b),
                    and_(MessageModel.sender == user_b, MessageModel.recipient == user_a),
                )
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession, clock: Clock) -> None:
        self._session = session
        self._clock = clock

    async def append(
        self,
        sender: UUID,
        recipient: UUID,
        text: str | None,
        file: str | None,
    ) -> Message:
        message = Message(
            id=uuid.uuid4(),
            sender=sender,
            recipient=recipient,
            text=text,
            file=file,
            created_at=self._clock.now(),
        )
        self._session.add(mapper.entity_to_model(message))
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"message insert failed: {exc}") from exc
        return message
