"""Formula domain entities."""

from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar
from uuid import uuid4

from pydantic import BaseModel, Field

from moleculex.core.entities.identity import IdentifiedModel, Timestamp


class FormulaUnit(str, Enum):
    """Unit in which ingredient amounts are expressed."""

    WEIGHT = "weight"
    DROPS = "drops"


class ProductType(str, Enum):
    """Kind of product a formula is meant for."""

    FINE_FRAGRANCE = "Fine Fragrance"
    CANDLE = "Candle"
    CREAM = "Cream"
    DIFFUSER = "Diffuser"
    SOAP = "Soap"
    BODY_LOTION = "Body Lotion"
    SHAMPOO = "Shampoo"
    AIR_FRESHENER = "Air Freshener"
    OTHER = "Other"


class EvaluationStatus(str, Enum):
    """Age of the blend at evaluation time."""

    FRESH = "Fresh"
    ONE_DAY = "1 Day"
    ONE_WEEK = "1 Week"
    TWO_WEEKS = "2 Weeks"
    ONE_MONTH = "1 Month+"


class FormulaIngredient(BaseModel):
    """A material line in a formula."""

    material_id: str
    amount: float = Field(default=0.0, ge=0)
    dilution: float = 100.0  # percent
    solvent_id: str | None = None


class FormulaEvaluation(BaseModel):
    """A smelling evaluation of a formula."""

    id: str = Field(default_factory=lambda: f"eval-{uuid4().hex}")
    date: Timestamp = Field(default_factory=lambda: datetime.now(UTC))
    status: EvaluationStatus = EvaluationStatus.FRESH
    notes: str = ""
    score: float = Field(default=0.0, ge=0, le=10)


class Formula(IdentifiedModel):
    """A perfume formula referencing materials by id."""

    id_prefix: ClassVar[str] = "formula"

    name: str
    unit: FormulaUnit = FormulaUnit.WEIGHT
    final_dilution: float = 100.0
    product_type: ProductType | None = None
    custom_product_type: str | None = None
    ingredients: list[FormulaIngredient] = Field(default_factory=list)
    notes: str | None = None
    evaluations: list[FormulaEvaluation] = Field(default_factory=list)
    mood: str | None = None  # a family name or "default"
    created_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_amount(self) -> float:
        return sum(ingredient.amount for ingredient in self.ingredients)
