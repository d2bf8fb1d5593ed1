"""Auth service: registration, login, OAuth find-or-create and token resolution.

Every call is independent: the service keeps no per-user state between
requests and always re-reads the user row from the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pydantic
from starlette.concurrency import run_in_threadpool

from bizbuilder.core.auth import AccessClaims, PasswordHasher, Provider, RefreshClaims, TokenService
from bizbuilder.core.errors import (
    Conflict,
    DuplicateError,
    NotFound,
    StorageError,
    Unauthorized,
    ValidationError,
    issues_from_pydantic,
)
from bizbuilder.core.logging import get_logger
from bizbuilder.models.user import User
from bizbuilder.schemas.user import RegisterIn
from bizbuilder.services.users import UserStore

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
MIN_USER_ID_LENGTH = 10


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str
    is_new_user: bool = False


@dataclass
class RefreshResult:
    user: User
    access_token: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        default_plan_id: str,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self._default_plan_id = default_plan_id

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create a password account and return it with a fresh token pair.

        Raises ValidationError (bad input) or Conflict (email taken).
        """
        try:
            data = RegisterIn(name=name, email=email, password=password)
        except pydantic.ValidationError as exc:
            raise ValidationError(details=issues_from_pydantic(exc.errors())) from exc

        email = _normalize_email(str(data.email))
        if await self._store.find_by_email(email) is not None:
            raise Conflict("User with this email already exists.")

        password_hash = await run_in_threadpool(self._hasher.hash, data.password)
        try:
            user = await self._store.insert(
                User(
                    name=data.name,
                    email=email,
                    password_hash=password_hash,
                    plan_id=self._default_plan_id,
                    last_login=_utcnow(),
                )
            )
        except DuplicateError as exc:
            if await self._store.find_by_email(email) is not None:
                # Lost a race against a concurrent registration of the same email
                raise Conflict("User with this email already exists.") from exc
            raise StorageError("Could not create user") from exc

        logger.info("User registered", user_id=user.id)
        return self._issue_pair(user, provider="email")

    async def login(self, email: str, password: str) -> AuthResult:
        """Check email/password; every failure reads the same to the caller."""
        user = await self._store.find_by_email(_normalize_email(email))
        if user is None or user.password_hash is None:
            # Unknown and OAuth-only accounts still cost one bcrypt check
            await run_in_threadpool(self._hasher.verify_dummy, password)
            raise Unauthorized(INVALID_CREDENTIALS)

        if not await run_in_threadpool(self._hasher.verify, password, user.password_hash):
            raise Unauthorized(INVALID_CREDENTIALS)

        user = await self._store.update(user.id, last_login=_utcnow()) or user
        logger.info("User logged in", user_id=user.id, provider="email")
        return self._issue_pair(user, provider="email")

    async def resolve_from_access_token(self, token: str) -> User | None:
        """Return the token's user, or None when the account no longer exists."""
        claims = self._tokens.verify_access(token)
        return await self._store.find_by_id(claims.user_id)

    async def refresh_access_token(self, refresh_token: str) -> RefreshResult:
        claims = self._tokens.verify_refresh(refresh_token)
        user = await self._store.find_by_id(claims.user_id)
        if user is None:
            raise Unauthorized("User not found")
        access_token = self._tokens.issue_access(self._access_claims(user, user.provider))
        return RefreshResult(user=user, access_token=access_token)

    def logout(self) -> bool:
        # Tokens are not tracked server-side; the boundary clears the cookies
        return True

    async def find_or_create_oauth_user(
        self, oauth_id: str, name: str, email: str | None
    ) -> AuthResult:
        """Return the account keyed by ``oauth_id``, creating it on first login.

        An email already owned by a different account is reported as a
        Conflict instead of creating a second account with the same email.
        """
        now = _utcnow()
        user = await self._store.find_by_id(oauth_id)
        if user is not None:
            if user.oauth_id != oauth_id:
                # Id belongs to a password account, not this OAuth identity
                logger.warning("OAuth id matches a non-OAuth account", user_id=user.id)
                raise Conflict("An account with this id already exists.")
            user = await self._store.update(user.id, last_login=now) or user
            logger.info("OAuth user authenticated", user_id=user.id)
            return self._issue_pair(user, provider="microsoft")

        email = _normalize_email(email) if email else None
        if email and await self._store.find_by_email(email) is not None:
            logger.warning("OAuth email collides with an existing account", oauth_id=oauth_id)
            raise Conflict("An account with this email already exists.")

        try:
            user = await self._store.insert(
                User(
                    id=oauth_id,
                    name=name,
                    email=email,
                    password_hash=None,
                    oauth_id=oauth_id,
                    plan_id=self._default_plan_id,
                    last_login=now,
                )
            )
        except DuplicateError as exc:
            raise Conflict("An account with this email already exists.") from exc

        logger.info("OAuth user created", user_id=user.id)
        result = self._issue_pair(user, provider="microsoft")
        result.is_new_user = True
        return result

    async def delete_user(self, user_id: str) -> bool:
        if not user_id or len(user_id) < MIN_USER_ID_LENGTH:
            raise ValidationError("Invalid user ID")
        if not await self._store.delete(user_id):
            raise NotFound("User not found")
        logger.info("User deleted", user_id=user_id)
        return True

    @staticmethod
    def _access_claims(user: User, provider: Provider) -> AccessClaims:
        return AccessClaims(user_id=user.id, email=user.email, name=user.name, provider=provider)

    def _issue_pair(self, user: User, provider: Provider) -> AuthResult:
        return AuthResult(
            user=user,
            access_token=self._tokens.issue_access(self._access_claims(user, provider)),
            refresh_token=self._tokens.issue_refresh(RefreshClaims(user_id=user.id)),
        )
