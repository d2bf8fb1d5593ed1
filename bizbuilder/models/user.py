"""User model — email/password accounts and Microsoft OAuth identities."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from bizbuilder.models.base import Base


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    # Generated UUID for password accounts, the OAuth subject id for OAuth accounts
    id: Mapped[str] = mapped_column(String(255), primary_key=True, default=_new_user_id)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Nullable for OAuth flows that do not share an email
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True, index=True)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # None for OAuth-only accounts
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    oauth_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    plan_id: Mapped[str] = mapped_column(String(36), ForeignKey("plans.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def provider(self) -> str:
        return "email" if self.password_hash is not None else "microsoft"

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r} provider={self.provider!r}>"
