"""CRM router — contacts, interactions and activities of the current user."""

from __future__ import annotations

import uuid
from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.api.dependencies import get_current_user, get_db
from bizbuilder.core.database import flush_or_conflict
from bizbuilder.core.errors import NotFound
from bizbuilder.core.logging import get_logger
from bizbuilder.models.crm import Activity, Contact, Interaction
from bizbuilder.models.user import User
from bizbuilder.schemas.common import ApiResponse
from bizbuilder.schemas.crm import (
    ActivityCreate,
    ActivityOut,
    ActivityUpdate,
    ContactCreate,
    ContactOut,
    ContactUpdate,
    InteractionCreate,
    InteractionOut,
    InteractionUpdate,
)

router = APIRouter(prefix="/crm", tags=["crm"])
logger = get_logger(__name__)

DbDep = Annotated[AsyncSession, Depends(get_db)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]

_DUPLICATE_CONTACT = "A contact with this email already exists."

Owned = TypeVar("Owned", Contact, Interaction, Activity)


async def _get_owned(
    db: AsyncSession, model: type[Owned], row_id: uuid.UUID, user: User, label: str
) -> Owned:
    row = (await db.execute(
        select(model).where(model.id == row_id, model.user_id == user.id)
    )).scalar_one_or_none()
    if not row:
        raise NotFound(f"{label} not found.")
    return row


# ── Contacts ─────────────────────────────────────────────────────────────────

@router.get("/contacts", response_model=ApiResponse[list[ContactOut]])
async def list_contacts(db: DbDep, current_user: CurrentUserDep) -> ApiResponse[list[ContactOut]]:
    result = await db.execute(
        select(Contact).where(Contact.user_id == current_user.id).order_by(Contact.created_at)
    )
    return ApiResponse(data=[ContactOut.model_validate(c) for c in result.scalars().all()])


@router.post("/contacts", response_model=ApiResponse[ContactOut], status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: ContactCreate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[ContactOut]:
    contact = Contact(user_id=current_user.id, **payload.model_dump())
    contact.email = contact.email.lower()
    db.add(contact)
    await flush_or_conflict(db, _DUPLICATE_CONTACT)
    await db.refresh(contact)
    logger.info("Contact created", contact_id=str(contact.id))
    return ApiResponse(data=ContactOut.model_validate(contact), message="Contact created")


@router.put("/contacts/{contact_id}", response_model=ApiResponse[ContactOut])
async def update_contact(
    contact_id: uuid.UUID, payload: ContactUpdate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[ContactOut]:
    contact = await _get_owned(db, Contact, contact_id, current_user, "Contact")
    data = payload.model_dump(exclude_unset=True)
    for field in ("first_name", "last_name", "email"):
        # required columns: null means "leave as is"
        if field in data and data[field] is None:
            data.pop(field)
    if "email" in data:
        data["email"] = data["email"].lower()
    for field, value in data.items():
        setattr(contact, field, value)
    await flush_or_conflict(db, _DUPLICATE_CONTACT)
    await db.refresh(contact)
    return ApiResponse(data=ContactOut.model_validate(contact), message="Contact updated")


@router.delete("/contacts/{contact_id}", response_model=ApiResponse[None])
async def delete_contact(
    contact_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[None]:
    contact = await _get_owned(db, Contact, contact_id, current_user, "Contact")
    await db.delete(contact)
    await db.flush()
    logger.info("Contact deleted", contact_id=str(contact_id))
    return ApiResponse(message="Contact deleted")


# ── Interactions ─────────────────────────────────────────────────────────────

@router.get("/interactions", response_model=ApiResponse[list[InteractionOut]])
async def list_interactions(
    db: DbDep,
    current_user: CurrentUserDep,
    contact_id: uuid.UUID | None = Query(None),
) -> ApiResponse[list[InteractionOut]]:
    query = select(Interaction).where(Interaction.user_id == current_user.id)
    if contact_id is not None:
        query = query.where(Interaction.contact_id == contact_id)
    result = await db.execute(query.order_by(Interaction.created_at))
    return ApiResponse(data=[InteractionOut.model_validate(i) for i in result.scalars().all()])


@router.post(
    "/interactions", response_model=ApiResponse[InteractionOut], status_code=status.HTTP_201_CREATED
)
async def create_interaction(
    payload: InteractionCreate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[InteractionOut]:
    await _get_owned(db, Contact, payload.contact_id, current_user, "Contact")
    interaction = Interaction(user_id=current_user.id, **payload.model_dump())
    db.add(interaction)
    await db.flush()
    await db.refresh(interaction)
    return ApiResponse(data=InteractionOut.model_validate(interaction), message="Interaction created")


@router.put("/interactions/{interaction_id}", response_model=ApiResponse[InteractionOut])
async def update_interaction(
    interaction_id: uuid.UUID,
    payload: InteractionUpdate,
    db: DbDep,
    current_user: CurrentUserDep,
) -> ApiResponse[InteractionOut]:
    interaction = await _get_owned(db, Interaction, interaction_id, current_user, "Interaction")
    data = payload.model_dump(exclude_unset=True)
    if "channel" in data and data["channel"] is None:
        data.pop("channel")
    for field, value in data.items():
        setattr(interaction, field, value)
    await db.flush()
    await db.refresh(interaction)
    return ApiResponse(data=InteractionOut.model_validate(interaction), message="Interaction updated")


@router.delete("/interactions/{interaction_id}", response_model=ApiResponse[None])
async def delete_interaction(
    interaction_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[None]:
    interaction = await _get_owned(db, Interaction, interaction_id, current_user, "Interaction")
    await db.delete(interaction)
    await db.flush()
    return ApiResponse(message="Interaction deleted")


# ── Activities ───────────────────────────────────────────────────────────────

@router.get("/activities", response_model=ApiResponse[list[ActivityOut]])
async def list_activities(
    db: DbDep,
    current_user: CurrentUserDep,
    completed: bool | None = Query(None),
) -> ApiResponse[list[ActivityOut]]:
    query = select(Activity).where(Activity.user_id == current_user.id)
    if completed is not None:
        query = query.where(Activity.completed == completed)
    result = await db.execute(query.order_by(Activity.created_at))
    return ApiResponse(data=[ActivityOut.model_validate(a) for a in result.scalars().all()])


@router.post("/activities", response_model=ApiResponse[ActivityOut], status_code=status.HTTP_201_CREATED)
async def create_activity(
    payload: ActivityCreate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[ActivityOut]:
    if payload.contact_id is not None:
        await _get_owned(db, Contact, payload.contact_id, current_user, "Contact")
    activity = Activity(user_id=current_user.id, **payload.model_dump())
    db.add(activity)
    await db.flush()
    await db.refresh(activity)
    return ApiResponse(data=ActivityOut.model_validate(activity), message="Activity created")


@router.put("/activities/{activity_id}", response_model=ApiResponse[ActivityOut])
async def update_activity(
    activity_id: uuid.UUID, payload: ActivityUpdate, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[ActivityOut]:
    activity = await _get_owned(db, Activity, activity_id, current_user, "Activity")
    data = payload.model_dump(exclude_unset=True)
    for field in ("type", "completed"):
        if field in data and data[field] is None:
            data.pop(field)
    if data.get("contact_id") is not None:
        await _get_owned(db, Contact, data["contact_id"], current_user, "Contact")
    for field, value in data.items():
        setattr(activity, field, value)
    await db.flush()
    await db.refresh(activity)
    return ApiResponse(data=ActivityOut.model_validate(activity), message="Activity updated")


@router.delete("/activities/{activity_id}", response_model=ApiResponse[None])
async def delete_activity(
    activity_id: uuid.UUID, db: DbDep, current_user: CurrentUserDep
) -> ApiResponse[None]:
    activity = await _get_owned(db, Activity, activity_id, current_user, "Activity")
    await db.delete(activity)
    await db.flush()
    return ApiResponse(message="Activity deleted")
