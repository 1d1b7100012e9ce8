"""Argon2id password hashing.

Hashing is CPU bound, so both operations run in the threadpool to keep the
event loop (and with it every live connection's heartbeat) responsive.
"""
from __future__ import annotations

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError
from starlette.concurrency import run_in_threadpool


class Argon2PasswordHasher:
    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 1,
    ) -> None:
        self._hasher = PasswordHasher(
            type=Type.ID,
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self._hasher.hash, password)

    async def verify(self, password_hash: str, password: str) -> bool:
        try:
            return await run_in_threadpool(self._hasher.verify, password_hash, password)
        except (VerificationError, InvalidHashError):
            return False
