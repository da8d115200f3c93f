"""Finished product domain entities."""

from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field

from moleculex.core.entities.identity import IdentifiedModel, Timestamp


class PackagingCategory(str, Enum):
    """Packaging slot on a finished product."""

    BOTTLE = "Bottle"
    PUMP = "Pump"
    CAP = "Cap"
    LABEL = "Label"
    BOX = "Box"
    OTHER = "Other"


class PackagingSelection(BaseModel):
    """A packaging component chosen for a product."""

    component_id: str
    name: str
    cost: float = 0.0


class CustomCost(BaseModel):
    """A free-form cost line."""

    id: str
    name: str
    cost: float = 0.0


class FinishedProduct(IdentifiedModel):
    """A bottled product built from a formula."""

    id_prefix: ClassVar[str] = "prod"

    name: str
    formula_id: str | None = None
    bottle_size: float = 0.0  # ml
    concentration: float = 0.0  # percent
    alcohol_cost_per_kg: float = 0.0
    labor_cost: float = 0.0
    overhead_cost: float = 0.0
    retail_price: float = 0.0
    packaging: dict[PackagingCategory, PackagingSelection | None] = Field(default_factory=dict)
    custom_packaging: list[PackagingSelection] = Field(default_factory=list)
    custom_costs: list[CustomCost] = Field(default_factory=list)
    created_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def packaging_cost(self) -> float:
        selected = sum(p.cost for p in self.packaging.values() if p is not None)
        return selected + sum(p.cost for p in self.custom_packaging)
