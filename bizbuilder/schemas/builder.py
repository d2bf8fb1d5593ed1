"""Schemas for the site builder: websites and their style/content documents.

The JSON documents keep the camelCase keys the site renderer reads
(``showHero``, ``fontFamily`` ...); snake_case names are accepted on input.
"""

from __future__ import annotations

import re as _re
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Single DNS label: lowercase alnum, inner hyphens allowed
_SUBDOMAIN_RE = _re.compile(r"^[a-z0-9](?:[a-z0-9\-]{0,61}[a-z0-9])?$")


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class SiteContent(_Document):
    name: str
    logo_url: str
    banner_url: str
    title: str
    tagline: str
    about: Any = None
    show_hero: Any = Field(default=None, alias="showHero")
    show_services: Any = Field(default=None, alias="showServices")
    show_about: Any = Field(default=None, alias="showAbout")
    show_gallery: Any = Field(default=None, alias="showGallery")


class SiteContact(_Document):
    email: EmailStr
    phone: str | int
    address: str
    social_media_links: Any = None


class SiteStyles(_Document):
    primary_color: str
    secondary_color: str | int
    text_primary_color: str
    text_secondary_color: str
    background_color: str
    hover_color: str
    font_family: str = Field(..., alias="fontFamily")


def dump_document(doc: _Document) -> dict[str, Any]:
    return doc.model_dump(mode="json", by_alias=True)


class WebsiteCreate(BaseModel):
    business_id: uuid.UUID
    website_url: str = Field(..., min_length=1, max_length=500)
    subdomain: str = Field(..., min_length=1, max_length=63)

    @field_validator("subdomain")
    @classmethod
    def _validate_subdomain(cls, v: str) -> str:
        v = v.lower()
        if not _SUBDOMAIN_RE.match(v):
            raise ValueError(f"Invalid subdomain: {v!r}")
        return v


class WebsiteUpdate(BaseModel):
    website_url: str | None = Field(default=None, min_length=1, max_length=500)
    subdomain: str | None = Field(default=None, min_length=1, max_length=63)

    @field_validator("subdomain")
    @classmethod
    def _validate_subdomain(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.lower()
        if not _SUBDOMAIN_RE.match(v):
            raise ValueError(f"Invalid subdomain: {v!r}")
        return v


class WebsiteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    business_id: uuid.UUID
    website_url: str
    subdomain: str
    created_at: datetime
    updated_at: datetime


class WebsiteStylesCreate(BaseModel):
    website_id: uuid.UUID
    content: SiteContent
    contact: SiteContact
    styles: SiteStyles


class WebsiteStylesUpdate(BaseModel):
    content: SiteContent | None = None
    contact: SiteContact | None = None
    styles: SiteStyles | None = None


class WebsiteStylesOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    website_id: uuid.UUID
    content: dict[str, Any]
    contact: dict[str, Any]
    styles: dict[str, Any]
    created_at: datetime
    updated_at: datetime
