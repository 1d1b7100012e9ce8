"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator, Callable
from uuid import UUID

import pytest
import pytest_asyncio

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import (
    ConflictError,
    PersistenceError,
    StorageWriteError,
    TransportSendError,
)
from direct_chat.domain.entities.message import Message
from direct_chat.domain.entities.user import User
from direct_chat.infrastructure.ws.connection import Connection
from direct_chat.infrastructure.ws.manager import ConnectionRegistry

ALICE_ID = UUID("00000000-0000-4000-8000-00000000a11c")
BOB_ID = UUID("00000000-0000-4000-8000-000000000b0b")


@pytest.fixture
def alice() -> Identity:
    return Identity(user_id=ALICE_ID, username="alice")


@pytest.fixture
def bob() -> Identity:
    return Identity(user_id=BOB_ID, username="bob")


def make_message(
    *,
    sender: UUID = ALICE_ID,
    recipient: UUID = BOB_ID,
    text: str | None = "hello",
    file: str | None = None,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        sender=sender,
        recipient=recipient,
        text=text,
        file=file,
        created_at=created_at or datetime.now(timezone.utc),
    )


@dataclass
class FakeTransport:
    """In-memory Transport that records every frame it is asked to send."""

    sent: list[dict[str, Any]] = field(default_factory=list)
    pings: int = 0
    closed: bool = False
    close_code: int | None = None
    fail_sends: bool = False
    on_ping: Callable[[], None] | None = None

    async def send_text(self, raw: str) -> None:
        if self.fail_sends:
            raise TransportSendError("connection reset")
        self.sent.append(json.loads(raw))

    async def ping(self) -> None:
        self.pings += 1
        if self.on_ping is not None:
            self.on_ping()

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.close_code = code

    @property
    def presence_frames(self) -> list[list[dict[str, Any]]]:
        return [f["online"] for f in self.sent if "online" in f]

    @property
    def deliveries(self) -> list[dict[str, Any]]:
        return [f for f in self.sent if "online" not in f]


def make_connection(identity: Identity | None = None) -> tuple[Connection, FakeTransport]:
    transport = FakeTransport()
    conn = Connection(transport)
    conn.identity = identity
    return conn, transport


@pytest_asyncio.fixture
async def registry() -> AsyncIterator[ConnectionRegistry]:
    reg = ConnectionRegistry(probe_interval=60, probe_grace=60)
    yield reg
    await reg.close_all()


@dataclass
class FakeBlobStorage:
    blobs: dict[str, bytes] = field(default_factory=dict)
    fail: bool = False

    async def put(self, filename: str, data: bytes) -> None:
        if self.fail:
            raise StorageWriteError("disk full")
        self.blobs[filename] = data


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_between(self, user_a: UUID, user_b: UUID) -> list[Message]:
        pair = {user_a, user_b}
        found = [m for m in self._messages if {m.sender, m.recipient} == pair]
        return sorted(found, key=lambda m: (m.created_at, m.id))


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    fail: bool = False
    _tick: int = 0

    async def append(
        self,
        sender: UUID,
        recipient: UUID,
        text: str | None,
        file: str | None,
    ) -> Message:
        if self.fail:
            raise PersistenceError("database unavailable")
        self._tick += 1
        msg = make_message(
            sender=sender,
            recipient=recipient,
            text=text,
            file=file,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=self._tick),
        )
        self._reader._messages.append(msg)
        return msg


@dataclass
class FakeUserReader:
    _users: dict[UUID, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    async def list_all(self) -> list[User]:
        return sorted(self._users.values(), key=lambda u: u.username)


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(self, username: str, password_hash: str) -> User:
        if await self._reader.get_by_username(username) is not None:
            raise ConflictError(f"Username {username!r} is taken")
        user = User(
            id=uuid.uuid4(),
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self._reader._users[user.id] = user
        return user

    def add(self, user_id: UUID, username: str, password_hash: str = "x") -> User:
        user = User(
            id=user_id,
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self._reader._users[user_id] = user
        return user


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    commits: int = 0

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)

    @property
    def stored(self) -> list[Message]:
        return self.messages._messages

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass

    def factory(self):
        """A UoWFactory that always hands out this instance."""

        @asynccontextmanager
        async def _open() -> AsyncIterator[FakeUoW]:
            yield self

        return _open


@dataclass
class FakePasswordHasher:
    """Reversible stand-in so tests don't pay for Argon2."""

    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password_hash: str, password: str) -> bool:
        return password_hash == f"hashed:{password}"
