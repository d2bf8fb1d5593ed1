"""Schemas for User and Auth resources."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterIn(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MicrosoftAuthIn(BaseModel):
    microsoft_id: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None


class RefreshIn(BaseModel):
    refresh_token: str | None = Field(default=None, alias="refreshToken")


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str | None
    plan_id: str
    photo_url: str | None = None
    provider: str
    created_at: datetime | None = None
    last_login: datetime | None = None


class AuthOut(BaseModel):
    """Body of register / login / OAuth responses (tokens mirror the cookies)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str | None
    name: str
    plan_id: str
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")


class RefreshOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    user: UserOut
