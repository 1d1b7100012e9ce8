from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from direct_chat.api.deps import CurrentIdentity, UoWDep
from direct_chat.api.v1.schemas.message import MessageResponse
from direct_chat.services import message_service

router = APIRouter(tags=["messages"])


@router.get("/messages/{user_id}", response_model=list[MessageResponse])
async def list_messages(
    user_id: UUID,
    identity: CurrentIdentity,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await message_service.list_conversation(identity, user_id, uow)
    return [MessageResponse.model_validate(m) for m in messages]
