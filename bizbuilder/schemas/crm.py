"""Schemas for CRM contacts, interactions and activities."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactCreate(BaseModel):
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone_number: str | None = Field(default=None, max_length=20)
    company_id: str | None = Field(default=None, max_length=100)
    job_title: str | None = Field(default=None, max_length=100)


class ContactUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=2, max_length=100)
    last_name: str | None = Field(default=None, min_length=2, max_length=100)
    email: EmailStr | None = None
    phone_number: str | None = Field(default=None, max_length=20)
    company_id: str | None = Field(default=None, max_length=100)
    job_title: str | None = Field(default=None, max_length=100)


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone_number: str | None
    company_id: str | None
    job_title: str | None
    created_at: datetime
    updated_at: datetime


class InteractionCreate(BaseModel):
    contact_id: uuid.UUID
    channel: str = Field(..., min_length=2, max_length=50)
    content: str | None = None


class InteractionUpdate(BaseModel):
    channel: str | None = Field(default=None, min_length=2, max_length=50)
    content: str | None = None


class InteractionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    contact_id: uuid.UUID
    user_id: str
    channel: str
    content: str | None
    created_at: datetime
    updated_at: datetime


class ActivityCreate(BaseModel):
    type: str = Field(..., min_length=2, max_length=50)
    description: str | None = None
    due_date: datetime | None = None
    completed: bool = False
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None


class ActivityUpdate(BaseModel):
    type: str | None = Field(default=None, min_length=2, max_length=50)
    description: str | None = None
    due_date: datetime | None = None
    completed: bool | None = None
    contact_id: uuid.UUID | None = None
    deal_id: uuid.UUID | None = None


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    type: str
    description: str | None
    due_date: datetime | None
    completed: bool
    user_id: str
    contact_id: uuid.UUID | None
    deal_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
