"""Authentication primitives: password hashing and JWT management.

Token flow:
    1. POST /api/users/login (or /register, /microsoft-auth) → verify
       credentials → issue an access token (24h) and a refresh token (7d),
       both returned in the body and set as httpOnly cookies.
    2. Protected endpoints read the access token from
       ``Authorization: Bearer <jwt>`` or the ``accessToken`` cookie.
    3. POST /api/users/refresh trades a refresh token for a new access token.

Access and refresh tokens are signed with independent secrets and carry a
``type`` claim, so one kind can never be replayed as the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import bcrypt
import jwt

from bizbuilder.core.config import Settings
from bizbuilder.core.errors import ExpiredTokenError, InvalidTokenError

ISSUER = "bizbuilder"

Provider = Literal["email", "microsoft"]


# ── Password helpers ─────────────────────────────────────────────────────────

class PasswordHasher:
    """bcrypt hashing at a fixed work factor.

    All methods are CPU-bound; async callers run them in the threadpool.
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"bizbuilder-dummy", bcrypt.gensalt(rounds=rounds))

    def hash(self, plain: str) -> str:
        return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, plain: str, hashed: str) -> bool:
        # A malformed stored hash raises ValueError here and is not a "no match"
        return bcrypt.checkpw(plain.encode(), hashed.encode())

    def verify_dummy(self, plain: str) -> bool:
        """Run a full bcrypt check against a fixed hash; always False."""
        bcrypt.checkpw(plain.encode(), self._dummy_hash)
        return False


# ── JWT helpers ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AccessClaims:
    user_id: str
    email: str | None
    name: str
    provider: Provider


@dataclass(frozen=True)
class RefreshClaims:
    user_id: str


class TokenService:
    """Issues and verifies access / refresh JWTs."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=24),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.access_token_secret,
            refresh_secret=settings.refresh_token_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=timedelta(hours=settings.access_token_expire_hours),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        )

    def issue_access(self, claims: AccessClaims) -> str:
        return self._encode(
            {
                "userId": claims.user_id,
                "email": claims.email,
                "name": claims.name,
                "provider": claims.provider,
            },
            token_type="access",
            secret=self._access_secret,
            ttl=self.access_ttl,
        )

    def issue_refresh(self, claims: RefreshClaims) -> str:
        return self._encode(
            {"userId": claims.user_id},
            token_type="refresh",
            secret=self._refresh_secret,
            ttl=self.refresh_ttl,
        )

    def verify_access(self, token: str) -> AccessClaims:
        payload = self._decode(token, token_type="access", secret=self._access_secret)
        provider = payload.get("provider")
        if provider not in ("email", "microsoft") or not isinstance(payload.get("name"), str):
            raise InvalidTokenError()
        return AccessClaims(
            user_id=payload["userId"],
            email=payload.get("email"),
            name=payload["name"],
            provider=provider,
        )

    def verify_refresh(self, token: str) -> RefreshClaims:
        payload = self._decode(token, token_type="refresh", secret=self._refresh_secret)
        return RefreshClaims(user_id=payload["userId"])

    def _encode(
        self, claims: dict[str, Any], *, token_type: str, secret: str, ttl: timedelta
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
            "iss": ISSUER,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, *, token_type: str, secret: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["userId", "exp", "iss", "type"]},
                issuer=ISSUER,
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError:
            raise InvalidTokenError()

        if payload.get("type") != token_type or not isinstance(payload.get("userId"), str):
            raise InvalidTokenError()
        return payload
