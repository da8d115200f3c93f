"""Derived, read-only view models. Never persisted."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from moleculex.core.entities.material import Material, OlfactiveFamily


class StockSummary(BaseModel):
    """Stock figures derived from a material's batches."""

    total_stock: float = 0.0
    total_value: float = 0.0
    avg_cost_per_gram: float = 0.0


class MaterialView(BaseModel):
    """A material together with its derived stock figures."""

    material: Material
    stock: StockSummary


class FamilyShare(BaseModel):
    """Weight of one olfactive family within a formula."""

    family: OlfactiveFamily
    weight: float


class ActivityEvent(BaseModel):
    """A dated creation event for the activity feed."""

    kind: Literal["material", "formula", "note"]
    entity_id: str
    title: str
    occurred_at: datetime


class DashboardStats(BaseModel):
    """Headline numbers for the dashboard."""

    total_materials: int = 0
    total_inventory_value: float = 0.0
    total_formulas: int = 0
