from __future__ import annotations

from fastapi import APIRouter, Response, status

from direct_chat.api.deps import (
    CurrentIdentity,
    PasswordHasherDep,
    TokenServiceDep,
    UoWDep,
)
from direct_chat.api.v1.schemas.account import (
    AccountResponse,
    CredentialsRequest,
    PersonResponse,
    ProfileResponse,
)
from direct_chat.config import settings
from direct_chat.services import account_service

router = APIRouter(tags=["account"])


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: CredentialsRequest,
    response: Response,
    uow: UoWDep,
    hasher: PasswordHasherDep,
    tokens: TokenServiceDep,
) -> AccountResponse:
    identity = await account_service.register(body.username, body.password, hasher, uow)
    _set_auth_cookie(response, tokens.issue(identity))
    return AccountResponse(id=identity.user_id)


@router.post("/login", response_model=AccountResponse)
async def login(
    body: CredentialsRequest,
    response: Response,
    uow: UoWDep,
    hasher: PasswordHasherDep,
    tokens: TokenServiceDep,
) -> AccountResponse:
    identity = await account_service.login(body.username, body.password, hasher, uow)
    _set_auth_cookie(response, tokens.issue(identity))
    return AccountResponse(id=identity.user_id)


@router.post("/logout")
async def logout(response: Response) -> str:
    response.delete_cookie(
        settings.AUTH_COOKIE_NAME,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )
    return "ok"


@router.get("/profile", response_model=ProfileResponse)
async def profile(identity: CurrentIdentity) -> ProfileResponse:
    return ProfileResponse(user_id=identity.user_id, username=identity.username)


@router.get("/people", response_model=list[PersonResponse])
async def people(_identity: CurrentIdentity, uow: UoWDep) -> list[PersonResponse]:
    users = await account_service.list_people(uow)
    return [PersonResponse.model_validate(u) for u in users]
