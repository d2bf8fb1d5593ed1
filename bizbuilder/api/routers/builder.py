"""Builder router — websites and their style/content documents.

Ownership is always checked through the parent business.
"""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.api.dependencies import get_current_user, get_db
from bizbuilder.api.routers.business import get_owned_business
from bizbuilder.core.database import flush_or_conflict
from bizbuilder.core.errors import NotFound, ValidationError
from bizbuilder.core.logging import get_logger
from bizbuilder.models.business import Business
from bizbuilder.models.user import User
from bizbuilder.models.website import Website, WebsiteStyles
from bizbuilder.schemas.builder import (
    WebsiteCreate,
    WebsiteOut,
    WebsiteStylesCreate,
    WebsiteStylesOut,
    WebsiteStylesUpdate,
    WebsiteUpdate,
    dump_document,
)
from bizbuilder.schemas.common import ApiResponse

router = APIRouter(prefix="/builder", tags=["builder"])
logger = get_logger(__name__)

DbDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]

_SUBDOMAIN_TAKEN = "Subdomain is already taken"


async def _get_owned_website(db: AsyncSession, website_id: uuid.UUID, user: User) -> Website:
    website = (await db.execute(
        select(Website)
        .join(Business, Business.id == Website.business_id)
        .where(Website.id == website_id, Business.user_id == user.id)
    )).scalar_one_or_none()
    if not website:
        raise NotFound("Website not found")
    return website


async def _get_owned_styles(db: AsyncSession, styles_id: uuid.UUID, user: User) -> WebsiteStyles:
    styles = (await db.execute(
        select(WebsiteStyles)
        .join(Website, Website.id == WebsiteStyles.website_id)
        .join(Business, Business.id == Website.business_id)
        .where(WebsiteStyles.id == styles_id, Business.user_id == user.id)
    )).scalar_one_or_none()
    if not styles:
        raise NotFound("Website styles not found")
    return styles


# ── Websites ─────────────────────────────────────────────────────────────────

@router.get("/websites/{business_id}", response_model=ApiResponse[WebsiteOut])
async def get_website_for_business(
    business_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[WebsiteOut]:
    """Return the website attached to a business."""
    await get_owned_business(db, business_id, current_user)
    website = (await db.execute(
        select(Website).where(Website.business_id == business_id).order_by(Website.created_at)
    )).scalars().first()
    if not website:
        raise NotFound("Website not found")
    return ApiResponse(data=WebsiteOut.model_validate(website))


@router.post("/websites", response_model=ApiResponse[WebsiteOut], status_code=status.HTTP_201_CREATED)
async def create_website(
    payload: WebsiteCreate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[WebsiteOut]:
    await get_owned_business(db, payload.business_id, current_user)
    website = Website(**payload.model_dump())
    db.add(website)
    await flush_or_conflict(db, _SUBDOMAIN_TAKEN)
    await db.refresh(website)
    logger.info("Website created", website_id=str(website.id), subdomain=website.subdomain)
    return ApiResponse(data=WebsiteOut.model_validate(website), message="Website created")


@router.put("/websites/{website_id}", response_model=ApiResponse[WebsiteOut])
async def update_website(
    website_id: uuid.UUID, payload: WebsiteUpdate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[WebsiteOut]:
    website = await _get_owned_website(db, website_id, current_user)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(website, field, value)
    await flush_or_conflict(db, _SUBDOMAIN_TAKEN)
    await db.refresh(website)
    return ApiResponse(data=WebsiteOut.model_validate(website), message="Website updated")


@router.delete("/websites/{website_id}", response_model=ApiResponse[None])
async def delete_website(
    website_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[None]:
    website = await _get_owned_website(db, website_id, current_user)
    await db.delete(website)
    await db.flush()
    logger.info("Website deleted", website_id=str(website_id))
    return ApiResponse(message="Website deleted")


# ── Website styles ───────────────────────────────────────────────────────────

@router.get("/website-styles", response_model=ApiResponse[list[WebsiteStylesOut]])
async def list_website_styles(
    db: DbDep,
    current_user: CurrentUserDep,
    website_id: uuid.UUID | None = Query(None),
) -> ApiResponse[list[WebsiteStylesOut]]:
    if website_id is None:
        raise ValidationError("website_id query parameter is required")
    await _get_owned_website(db, website_id, current_user)
    result = await db.execute(
        select(WebsiteStyles)
        .where(WebsiteStyles.website_id == website_id)
        .order_by(WebsiteStyles.created_at)
    )
    return ApiResponse(data=[WebsiteStylesOut.model_validate(s) for s in result.scalars().all()])


@router.post(
    "/website-styles",
    response_model=ApiResponse[WebsiteStylesOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_website_styles(
    payload: WebsiteStylesCreate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[WebsiteStylesOut]:
    await _get_owned_website(db, payload.website_id, current_user)
    styles = WebsiteStyles(
        website_id=payload.website_id,
        content=dump_document(payload.content),
        contact=dump_document(payload.contact),
        styles=dump_document(payload.styles),
    )
    db.add(styles)
    await db.flush()
    await db.refresh(styles)
    return ApiResponse(data=WebsiteStylesOut.model_validate(styles), message="Website styles created")


@router.put("/website-styles/{styles_id}", response_model=ApiResponse[WebsiteStylesOut])
async def update_website_styles(
    styles_id: uuid.UUID, payload: WebsiteStylesUpdate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[WebsiteStylesOut]:
    styles = await _get_owned_styles(db, styles_id, current_user)
    # Documents are replaced whole, never merged
    for field in ("content", "contact", "styles"):
        doc = getattr(payload, field)
        if doc is not None:
            setattr(styles, field, dump_document(doc))
    await db.flush()
    await db.refresh(styles)
    return ApiResponse(data=WebsiteStylesOut.model_validate(styles), message="Website styles updated")


@router.delete("/website-styles/{styles_id}", response_model=ApiResponse[None])
async def delete_website_styles(
    styles_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[None]:
    styles = await _get_owned_styles(db, styles_id, current_user)
    await db.delete(styles)
    await db.flush()
    return ApiResponse(message="Website styles deleted")
