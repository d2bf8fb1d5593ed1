"""Plans router — the public subscription catalog."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.api.dependencies import get_db
from bizbuilder.core.errors import NotFound
from bizbuilder.models.plan import Plan
from bizbuilder.schemas.common import ApiResponse
from bizbuilder.schemas.plan import PlanList, PlanOut

router = APIRouter(prefix="/plans", tags=["plans"])

DbDep = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=ApiResponse[PlanList])
async def list_plans(db: DbDep) -> ApiResponse[PlanList]:
    result = await db.execute(select(Plan).order_by(Plan.amount))
    plans = [PlanOut.model_validate(p) for p in result.scalars().all()]
    return ApiResponse(data=PlanList(total=len(plans), items=plans))


@router.get("/{plan_id}", response_model=ApiResponse[PlanOut])
async def get_plan(plan_id: str, db: DbDep) -> ApiResponse[PlanOut]:
    plan = (await db.execute(select(Plan).where(Plan.id == plan_id))).scalar_one_or_none()
    if not plan:
        raise NotFound("Plan not found")
    return ApiResponse(data=PlanOut.model_validate(plan))
