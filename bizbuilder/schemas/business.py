"""Schemas for Business resources."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


class BusinessBase(BaseModel):
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    address: str | None = Field(default=None, max_length=255)
    logo_url: HttpUrl | None = None


class BusinessCreate(BusinessBase):
    business_name: str = Field(..., min_length=2, max_length=255)


class BusinessUpdate(BusinessBase):
    business_name: str | None = Field(default=None, min_length=2, max_length=255)


class BusinessOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    business_name: str
    contact_email: str | None
    contact_phone: str | None
    address: str | None
    logo_url: str | None
    created_at: datetime
    updated_at: datetime
