"""FastAPI dependency providers."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.core.auth import AccessClaims, TokenService
from bizbuilder.core.config import Settings
from bizbuilder.core.database import get_session_factory
from bizbuilder.core.errors import Unauthorized
from bizbuilder.models.user import User
from bizbuilder.services.auth import AuthService
from bizbuilder.services.users import UserStore

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the duration of a request."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Components built once in create_app() and injected from app.state

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthService:
    state = request.app.state
    return AuthService(
        store=UserStore(db),
        hasher=state.password_hasher,
        tokens=state.token_service,
        default_plan_id=state.settings.default_plan_id,
    )


def extract_access_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Bearer header first, then the ``accessToken`` cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise Unauthorized("Access token missing or invalid")
    return token


def get_token_claims(
    token: Annotated[str, Depends(extract_access_token)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AccessClaims:
    """Cryptographic check only; does not touch the database."""
    return tokens.verify_access(token)


async def get_current_user(
    token: Annotated[str, Depends(extract_access_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Resolve the bearer token to a live User row (401 if it is gone)."""
    user = await auth.resolve_from_access_token(token)
    if user is None:
        raise Unauthorized("User not found")
    return user
