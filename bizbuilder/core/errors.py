"""Typed application errors.

Every failure a service can report carries a ``kind`` (machine-readable),
a ``status_hint`` (the HTTP status the API boundary should answer with),
a human ``detail`` and optional structured ``details`` (e.g. per-field
validation issues).  ``bizbuilder.api.exception_handlers`` turns them into
``{"success": false, "error": ..., "details": ...}`` responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for all errors surfaced to API clients."""

    kind: str = "server_error"
    status_hint: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Something went wrong"

    def __init__(self, detail: str | None = None, details: list[Any] | None = None) -> None:
        self.detail = detail or self.default_detail
        self.details = details
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "error": self.detail}
        if self.details:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind!r} status={self.status_hint} detail={self.detail!r}>"


class ValidationError(AppError):
    kind = "validation_error"
    status_hint = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"


class Unauthorized(AppError):
    kind = "unauthorized"
    status_hint = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class InvalidTokenError(Unauthorized):
    kind = "invalid_token"
    default_detail = "Invalid or expired token"


class ExpiredTokenError(Unauthorized):
    kind = "expired_token"
    # Same wording as InvalidTokenError: clients are not told which one it was
    default_detail = "Invalid or expired token"


class Forbidden(AppError):
    kind = "forbidden"
    status_hint = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(AppError):
    kind = "not_found"
    status_hint = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(AppError):
    kind = "conflict"
    status_hint = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class DuplicateError(Conflict):
    """A unique constraint was violated on insert/update."""

    kind = "duplicate"


class ServerError(AppError):
    pass


class StorageError(ServerError):
    kind = "storage_error"
    default_detail = "Database operation failed"


def issues_from_pydantic(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten pydantic ``errors()`` into ``{field, message}`` issues."""
    issues = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        issues.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return issues
