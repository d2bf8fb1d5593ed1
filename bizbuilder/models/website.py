"""Website and WebsiteStyles models — the site-builder records."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import JSON, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bizbuilder.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Website(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "websites"

    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    website_url: Mapped[str] = mapped_column(String(500), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Website subdomain={self.subdomain!r}>"


class WebsiteStyles(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "website_styles"

    website_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("websites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Free-form JSON documents, shape enforced by schemas/builder.py
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    contact: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    styles: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<WebsiteStyles website={self.website_id}>"
