"""Health router — liveness and uptime."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

from bizbuilder.schemas.common import ApiResponse

router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    uptime: int


@router.get("", response_model=ApiResponse[HealthStatus])
async def health(request: Request) -> ApiResponse[HealthStatus]:
    uptime = int(time.monotonic() - request.app.state.started_at)
    return ApiResponse(
        data=HealthStatus(status="OK", timestamp=datetime.now(timezone.utc), uptime=uptime),
        message="Health check successful",
    )
