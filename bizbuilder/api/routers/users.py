"""Users router — register, login, OAuth, token refresh, logout, delete."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from bizbuilder.api.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    extract_access_token,
    get_app_settings,
    get_auth_service,
    get_token_claims,
)
from bizbuilder.core.auth import AccessClaims
from bizbuilder.core.config import Settings
from bizbuilder.core.errors import Forbidden, Unauthorized
from bizbuilder.schemas.common import ApiResponse
from bizbuilder.schemas.user import (
    AuthOut,
    LoginIn,
    MicrosoftAuthIn,
    RefreshIn,
    RefreshOut,
    RegisterIn,
    UserOut,
)
from bizbuilder.services.auth import AuthResult, AuthService

router = APIRouter(prefix="/users", tags=["users"])

AuthDep = Annotated[AuthService, Depends(get_auth_service)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]


# ── Cookie helpers ───────────────────────────────────────────────────────────

def _set_cookie(response: Response, settings: Settings, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def _set_access_cookie(response: Response, settings: Settings, token: str) -> None:
    _set_cookie(response, settings, ACCESS_COOKIE, token, settings.access_token_expire_hours * 3600)


def _set_auth_cookies(response: Response, settings: Settings, result: AuthResult) -> None:
    _set_access_cookie(response, settings, result.access_token)
    _set_cookie(
        response, settings, REFRESH_COOKIE, result.refresh_token,
        settings.refresh_token_expire_days * 86400,
    )


def _auth_out(result: AuthResult) -> AuthOut:
    return AuthOut(
        id=result.user.id,
        email=result.user.email,
        name=result.user.name,
        plan_id=result.user.plan_id,
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


# ── Endpoints ────────────────────────────────────────────────────────────────

@router.post("/register", response_model=ApiResponse[AuthOut], status_code=status.HTTP_201_CREATED)
async def register(
    response: Response,
    payload: RegisterIn,
    auth: AuthDep,
    settings: SettingsDep,
) -> ApiResponse[AuthOut]:
    result = await auth.register(payload.name, str(payload.email), payload.password)
    _set_auth_cookies(response, settings, result)
    return ApiResponse(data=_auth_out(result), message="User created successfully")


@router.post("/login", response_model=ApiResponse[AuthOut])
async def login(
    response: Response,
    payload: LoginIn,
    auth: AuthDep,
    settings: SettingsDep,
) -> ApiResponse[AuthOut]:
    result = await auth.login(payload.email, payload.password)
    _set_auth_cookies(response, settings, result)
    return ApiResponse(data=_auth_out(result), message="Login successful")


@router.get("/me", response_model=ApiResponse[UserOut])
async def get_me(
    token: Annotated[str, Depends(extract_access_token)],
    auth: AuthDep,
) -> ApiResponse[UserOut]:
    """Return the token's user; ``data`` is null when the account was deleted."""
    user = await auth.resolve_from_access_token(token)
    return ApiResponse(
        data=UserOut.model_validate(user) if user is not None else None,
        message="User retrieved successfully",
    )


@router.post("/refresh", response_model=ApiResponse[RefreshOut])
async def refresh(
    request: Request,
    response: Response,
    auth: AuthDep,
    settings: SettingsDep,
    payload: RefreshIn | None = None,
) -> ApiResponse[RefreshOut]:
    """Trade the refresh token (cookie, or body ``refreshToken``) for a new access token."""
    token = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    if not token:
        raise Unauthorized("Refresh token missing")

    result = await auth.refresh_access_token(token)
    _set_access_cookie(response, settings, result.access_token)
    return ApiResponse(
        data=RefreshOut(access_token=result.access_token, user=UserOut.model_validate(result.user)),
        message="Token refreshed",
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(response: Response, auth: AuthDep, settings: SettingsDep) -> ApiResponse[None]:
    auth.logout()
    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            key, path="/", httponly=True, secure=settings.is_production, samesite="strict"
        )
    return ApiResponse(message="Logout successful")


@router.post("/microsoft-auth", response_model=ApiResponse[AuthOut])
async def microsoft_auth(
    response: Response,
    payload: MicrosoftAuthIn,
    auth: AuthDep,
    settings: SettingsDep,
) -> ApiResponse[AuthOut]:
    """Find or create the account for a Microsoft OAuth identity."""
    result = await auth.find_or_create_oauth_user(
        payload.microsoft_id,
        payload.name,
        str(payload.email) if payload.email else None,
    )
    _set_auth_cookies(response, settings, result)
    message = "User created successfully" if result.is_new_user else "User authenticated successfully"
    return ApiResponse(data=_auth_out(result), message=message)


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: str,
    claims: Annotated[AccessClaims, Depends(get_token_claims)],
    auth: AuthDep,
) -> ApiResponse[None]:
    """Delete the caller's own account."""
    if claims.user_id != user_id:
        raise Forbidden("You can only delete your own account")
    await auth.delete_user(user_id)
    return ApiResponse(message="User deleted successfully")
