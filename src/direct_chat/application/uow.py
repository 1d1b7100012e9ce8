from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from direct_chat.application.repositories.message import MessageReader, MessageWriter
from direct_chat.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    messages: MessageReader
    messages_w: MessageWriter
    users: UserReader
    users_w: UserWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


# Opens a fresh unit of work; used where no request-scoped dependency exists (WebSocket frames).
UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]
