from __future__ import annotations

import jwt
import pytest

from direct_chat.application.exceptions import InvalidTokenError
from direct_chat.infrastructure.auth.hs256_verifier import HS256TokenService
from direct_chat.infrastructure.auth.passwords import Argon2PasswordHasher

SECRET = "unit-test-secret-0123456789abcdefghij"


@pytest.fixture
def tokens() -> HS256TokenService:
    return HS256TokenService(SECRET)


@pytest.mark.asyncio
async def test_issued_token_verifies(tokens, alice):
    assert await tokens.verify(tokens.issue(alice)) == alice


@pytest.mark.asyncio
async def test_wrong_secret_is_rejected(alice):
    token = HS256TokenService("another-secret-0123456789abcdefghijkl").issue(alice)

    with pytest.raises(InvalidTokenError):
        await HS256TokenService(SECRET).verify(token)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "claims",
    [{"username": "alice"}, {"sub": "not-a-uuid", "username": "x"}, {"sub": "3f1c0c3e-0000-4000-8000-000000000001"}],
)
async def test_malformed_claims_are_rejected(tokens, claims):
    token = jwt.encode(claims, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        await tokens.verify(token)


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(tokens):
    with pytest.raises(InvalidTokenError):
        await tokens.verify("definitely.not.a-jwt")


@pytest.mark.asyncio
async def test_argon2_hash_roundtrip():
    hasher = Argon2PasswordHasher(time_cost=1, memory_cost=1024)

    hashed = await hasher.hash("correct horse")

    assert hashed.startswith("$argon2id$")
    assert await hasher.verify(hashed, "correct horse") is True
    assert await hasher.verify(hashed, "battery staple") is False
    assert await hasher.verify("not-a-hash", "x") is False
