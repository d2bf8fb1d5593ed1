"""Subscription plan catalog.

Seeded into the ``plans`` table on startup; ``User.plan_id`` references it.
Amounts are monthly, in UYU.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bizbuilder.core.config import DEFAULT_PLAN_ID
from bizbuilder.models.plan import Plan


class PlanSpec(TypedDict):
    id: str
    name: str
    amount: Decimal
    reason: str
    features: list[str]


PLANS: list[PlanSpec] = [
    {
        "id": DEFAULT_PLAN_ID,
        "name": "FREE",
        "amount": Decimal("0.00"),
        "reason": "Suscripción Plan FREE",
        "features": ["All Features for 14 days"],
    },
    {
        "id": "26486f38-5d1b-445b-8d8a-feb87f90dd3c",
        "name": "BASICO",
        "amount": Decimal("480.00"),
        "reason": "Suscripción Plan BASICO",
        "features": [
            "Chatbot Inteligente para WhatsApp",
            "Constructor de tu sitio Web",
        ],
    },
    {
        "id": "469c145d-3ed8-42c2-be32-89e8c33fc648",
        "name": "MEJORADO",
        "amount": Decimal("1000.00"),
        "reason": "Suscripción Plan MEJORADO",
        "features": [
            "Chatbot Inteligente (WhatsApp, Instagram, Facebook)",
            "Constructor de tu sitio web",
            "Gestor de redes sociales automatizable",
            "Panel de control de métricas y analíticas",
        ],
    },
    {
        "id": "703b2211-f9c6-421a-bc36-abe9188cb40e",
        "name": "AVANZADO",
        "amount": Decimal("1400.00"),
        "reason": "Suscripción Plan AVANZADO",
        "features": [
            "Chatbot Inteligente (WhatsApp, Instagram, Facebook)",
            "Constructor de tu sitio web",
            "Gestor de redes sociales automatizable",
            "Sistema de reservas y cobros online",
            "Panel de control de métricas y analíticas",
        ],
    },
    {
        "id": "85424b68-2c3e-4519-9893-4fbfe30aa314",
        "name": "PREMIUM",
        "amount": Decimal("1800.00"),
        "reason": "Suscripción Plan PREMIUM",
        "features": [
            "Chatbot Inteligente (WhatsApp, Instagram, Facebook)",
            "Constructor de tu sitio web",
            "Gestor de redes sociales automatizable",
            "Sistema de reservas y cobros online",
            "Panel de control de métricas y analíticas",
            "CRM para fidelizar clientes",
        ],
    },
]


async def seed_plans(session: AsyncSession) -> int:
    """Insert catalog plans missing from the database. Returns rows added."""
    existing = set((await session.execute(select(Plan.id))).scalars().all())
    added = 0
    for spec in PLANS:
        if spec["id"] in existing:
            continue
        session.add(Plan(**spec))
        added += 1
    if added:
        await session.flush()
    return added
