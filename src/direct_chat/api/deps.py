"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from direct_chat.application.dto.identity import Identity
from direct_chat.application.exceptions import InvalidTokenError
from direct_chat.application.uow import UnitOfWork
from direct_chat.config import settings
from direct_chat.infrastructure.auth.hs256_verifier import HS256TokenService
from direct_chat.infrastructure.auth.passwords import Argon2PasswordHasher

_cookie_scheme = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)
_bearer_scheme = HTTPBearer(auto_error=False)


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    async with request.app.state.uow_factory() as uow:
        yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


_token_service: HS256TokenService | None = None
_password_hasher: Argon2PasswordHasher | None = None


def get_token_service() -> HS256TokenService:
    global _token_service  # noqa: PLW0603
    if _token_service is None:
        _token_service = HS256TokenService(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _token_service


def get_password_hasher() -> Argon2PasswordHasher:
    global _password_hasher  # noqa: PLW0603
    if _password_hasher is None:
        _password_hasher = Argon2PasswordHasher()
    return _password_hasher


TokenServiceDep = Annotated[HS256TokenService, Depends(get_token_service)]
PasswordHasherDep = Annotated[Argon2PasswordHasher, Depends(get_password_hasher)]


async def get_current_identity(
    cookie_token: Annotated[str | None, Depends(_cookie_scheme)],
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    tokens: TokenServiceDep,
) -> Identity:
    token = cookie_token or (bearer.credentials if bearer else None)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token")
    try:
        return await tokens.verify(token)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
