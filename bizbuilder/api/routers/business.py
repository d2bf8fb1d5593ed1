"""Business router — the current user's business profiles."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.api.dependencies import get_current_user, get_db
from bizbuilder.core.errors import NotFound
from bizbuilder.core.logging import get_logger
from bizbuilder.models.business import Business
from bizbuilder.models.user import User
from bizbuilder.schemas.business import BusinessCreate, BusinessOut, BusinessUpdate
from bizbuilder.schemas.common import ApiResponse

router = APIRouter(prefix="/business", tags=["business"])
logger = get_logger(__name__)

DbDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]


async def get_owned_business(db: AsyncSession, business_id: uuid.UUID, user: User) -> Business:
    """Return the business if it exists and belongs to *user*, else 404."""
    business = (await db.execute(
        select(Business).where(Business.id == business_id, Business.user_id == user.id)
    )).scalar_one_or_none()
    if not business:
        raise NotFound("Business not found")
    return business


@router.get("", response_model=ApiResponse[list[BusinessOut]])
async def list_businesses(db: DbDep, current_user: CurrentUserDep) -> ApiResponse[list[BusinessOut]]:
    result = await db.execute(
        select(Business).where(Business.user_id == current_user.id).order_by(Business.created_at)
    )
    return ApiResponse(data=[BusinessOut.model_validate(b) for b in result.scalars().all()])


@router.get("/{business_id}", response_model=ApiResponse[BusinessOut])
async def get_business(
    business_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[BusinessOut]:
    business = await get_owned_business(db, business_id, current_user)
    return ApiResponse(data=BusinessOut.model_validate(business))


@router.post("", response_model=ApiResponse[BusinessOut], status_code=status.HTTP_201_CREATED)
async def create_business(
    payload: BusinessCreate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[BusinessOut]:
    business = Business(user_id=current_user.id, **payload.model_dump(mode="json"))
    db.add(business)
    await db.flush()
    await db.refresh(business)
    logger.info("Business created", business_id=str(business.id), user_id=current_user.id)
    return ApiResponse(data=BusinessOut.model_validate(business), message="Business created")


@router.put("/{business_id}", response_model=ApiResponse[BusinessOut])
async def update_business(
    business_id: uuid.UUID, payload: BusinessUpdate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[BusinessOut]:
    business = await get_owned_business(db, business_id, current_user)
    data = payload.model_dump(mode="json", exclude_unset=True)
    # business_name is required on the row; an explicit null leaves it unchanged
    if data.get("business_name") is None:
        data.pop("business_name", None)
    for field, value in data.items():
        setattr(business, field, value)
    await db.flush()
    await db.refresh(business)
    return ApiResponse(data=BusinessOut.model_validate(business), message="Business updated")


@router.delete("/{business_id}", response_model=ApiResponse[None])
async def delete_business(
    business_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[None]:
    business = await get_owned_business(db, business_id, current_user)
    await db.delete(business)
    await db.flush()
    logger.info("Business deleted", business_id=str(business_id))
    return ApiResponse(message="Business deleted")
