from __future__ import annotations

import logging

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import AuthenticationError, ConflictError
from direct_chat.application.ports.auth import PasswordHasher
from direct_chat.application.uow import UnitOfWork
from direct_chat.domain.entities.user import User

logger = logging.getLogger(__name__)


async def register(
    username: str,
    password: str,
    hasher: PasswordHasher,
    uow: UnitOfWork,
) -> Identity:
    if await uow.users.get_by_username(username) is not None:
        raise ConflictError(f"Username {username!r} is taken")
    user = await uow.users_w.create(username, await hasher.hash(password))
    await uow.commit()
    logger.info("Registered user %s (%s)", user.username, user.id)
    return Identity(user_id=user.id, username=user.username)


async def login(
    username: str,
    password: str,
    hasher: PasswordHasher,
    uow: UnitOfWork,
) -> Identity:
    user = await uow.users.get_by_username(username)
    if user is None:
        raise AuthenticationError("User not found")
    if not await hasher.verify(user.password_hash, password):
        raise AuthenticationError("Invalid password")
    return Identity(user_id=user.id, username=user.username)


async def list_people(uow: UnitOfWork) -> list[User]:
    return await uow.users.list_all()
