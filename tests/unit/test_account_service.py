from __future__ import annotations

import uuid

import pytest

from direct_chat.application.exceptions import AuthenticationError, ConflictError, NotFoundError
from direct_chat.services import account_service, message_service
from tests.conftest import ALICE_ID, BOB_ID, FakePasswordHasher, FakeUoW, make_message


@pytest.fixture
def hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.mark.asyncio
async def test_register_creates_user_and_commits(hasher):
    uow = FakeUoW()

    identity = await account_service.register("alice", "s3cret", hasher, uow)

    user = await uow.users.get_by_username("alice")
    assert user is not None
    assert identity.user_id == user.id
    assert user.password_hash == "hashed:s3cret"
    assert uow.commits == 1


@pytest.mark.asyncio
async def test_register_rejects_taken_username(hasher):
    uow = FakeUoW()
    await account_service.register("alice", "one", hasher, uow)

    with pytest.raises(ConflictError):
        await account_service.register("alice", "two", hasher, uow)


@pytest.mark.asyncio
async def test_login_returns_identity(hasher):
    uow = FakeUoW()
    registered = await account_service.register("bob", "pw", hasher, uow)

    identity = await account_service.login("bob", "pw", hasher, uow)

    assert identity == registered


@pytest.mark.asyncio
@pytest.mark.parametrize(("username", "password"), [("bob", "wrong"), ("nobody", "pw")])
async def test_login_failures(hasher, username, password):
    uow = FakeUoW()
    await account_service.register("bob", "pw", hasher, uow)

    with pytest.raises(AuthenticationError):
        await account_service.login(username, password, hasher, uow)


@pytest.mark.asyncio
async def test_conversation_history_is_ordered_and_scoped(alice):
    uow = FakeUoW()
    uow.users_w.add(BOB_ID, "bob")
    first = await uow.messages_w.append(ALICE_ID, BOB_ID, "one", None)
    second = await uow.messages_w.append(BOB_ID, ALICE_ID, "two", None)
    await uow.messages_w.append(BOB_ID, uuid.uuid4(), "elsewhere", None)

    history = await message_service.list_conversation(alice, BOB_ID, uow)

    assert [m.id for m in history] == [first.id, second.id]


@pytest.mark.asyncio
async def test_conversation_with_unknown_user(alice):
    uow = FakeUoW()
    uow.stored.append(make_message())

    with pytest.raises(NotFoundError):
        await message_service.list_conversation(alice, uuid.uuid4(), uow)
