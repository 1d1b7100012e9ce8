from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from direct_chat.api.v1.schemas.common import CamelModel


class CredentialsRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=256)


class AccountResponse(BaseModel):
    id: UUID


class ProfileResponse(CamelModel):
    user_id: UUID
    username: str


class PersonResponse(BaseModel):
    id: UUID
    username: str

    model_config = {"from_attributes": True}
