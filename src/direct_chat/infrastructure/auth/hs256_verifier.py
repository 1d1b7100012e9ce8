from __future__ import annotations

from uuid import UUID

import jwt

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import InvalidTokenError


class HS256TokenService:
    """Issue and verify JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, identity: Identity) -> str:
        return jwt.encode(
            {"sub": str(identity.user_id), "username": identity.username},
            self._secret,
            algorithm=self._algorithm,
        )

    async def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
        try:
            return Identity(user_id=UUID(payload["sub"]), username=str(payload["username"]))
        except (KeyError, ValueError, TypeError) as exc:
            raise InvalidTokenError(f"malformed claims: {exc}") from exc
