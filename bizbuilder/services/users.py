"""SQLAlchemy-backed credential store for User rows."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.core.errors import DuplicateError, StorageError
from bizbuilder.core.logging import get_logger
from bizbuilder.models.user import User

logger = get_logger(__name__)


class UserStore:
    """Lookup / insert / update / delete of users within one request session.

    Unique-constraint violations surface as ``DuplicateError``; any other
    database failure as ``StorageError``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: str) -> User | None:
        async with self._storage_errors():
            result = await self._session.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        async with self._storage_errors():
            result = await self._session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def insert(self, user: User) -> User:
        async with self._storage_errors():
            self._session.add(user)
            await self._session.flush()
            await self._session.refresh(user)
        return user

    async def update(self, user_id: str, **fields: Any) -> User | None:
        async with self._storage_errors():
            user = await self.find_by_id(user_id)
            if user is None:
                return None
            for field, value in fields.items():
                setattr(user, field, value)
            await self._session.flush()
            await self._session.refresh(user)
        return user

    async def delete(self, user_id: str) -> bool:
        async with self._storage_errors():
            user = await self.find_by_id(user_id)
            if user is None:
                return False
            await self._session.delete(user)
            await self._session.flush()
        return True

    @asynccontextmanager
    async def _storage_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning("Unique constraint violated", error=str(exc.orig))
            raise DuplicateError("Duplicate value violates a unique constraint") from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("Database operation failed", error=str(exc))
            raise StorageError() from exc
