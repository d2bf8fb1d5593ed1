"""Schemas for the plan catalog."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    # Monthly price in UYU
    amount: float
    features: list[str]


class PlanList(BaseModel):
    total: int
    items: list[PlanOut]
