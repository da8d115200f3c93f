"""Request DTOs for the HTTP surface."""

from datetime import date

from pydantic import BaseModel, Field

from moleculex.core.entities import (
    CustomCost,
    FormulaEvaluation,
    FormulaIngredient,
    FormulaUnit,
    FunctionalRole,
    MaterialOrigin,
    NoteRole,
    OlfactiveFamily,
    PackagingCategory,
    PackagingSelection,
    PhysicalState,
    ProductType,
)


class BatchRequest(BaseModel):
    """Inventory batch payload. Omit id for a new batch."""

    id: str | None = None
    batch_number: str = ""
    lab: str = ""
    supplier: str = ""
    purchase_date: date | None = None
    stock_amount: float = Field(default=0.0, ge=0)
    cost_per_gram: float = Field(default=0.0, ge=0)


class MaterialRequest(BaseModel):
    """Material payload for create and update."""

    name: str = Field(..., min_length=1)
    olfactive_family: OlfactiveFamily = OlfactiveFamily.ADDITIVE
    origin: MaterialOrigin | None = None
    physical_state: PhysicalState | None = None
    note_roles: list[NoteRole] = Field(default_factory=list)
    functional_roles: list[FunctionalRole] = Field(default_factory=list)
    cas_number: str | None = None
    iupac_name: str | None = None
    odor_strength: float = 0.0
    impact: float = 0.0
    scent_dna: dict[str, float] = Field(default_factory=dict)
    evaporation_curve: list[float] = Field(default_factory=list)
    synergies: list[str] = Field(default_factory=list)
    ifra_max_concentration: float = 100.0
    sds_filename: str | None = None
    sds_url: str | None = None
    inventory_batches: list[BatchRequest] = Field(default_factory=list)


class FormulaRequest(BaseModel):
    """Formula payload for create and update."""

    name: str = Field(..., min_length=1)
    unit: FormulaUnit = FormulaUnit.WEIGHT
    final_dilution: float = 100.0
    product_type: ProductType | None = None
    custom_product_type: str | None = None
    ingredients: list[FormulaIngredient] = Field(default_factory=list)
    notes: str | None = None
    evaluations: list[FormulaEvaluation] = Field(default_factory=list)
    mood: str | None = None


class ProductRequest(BaseModel):
    """Finished product payload for create and update."""

    name: str = Field(..., min_length=1)
    formula_id: str | None = None
    bottle_size: float = 0.0
    concentration: float = 0.0
    alcohol_cost_per_kg: float = 0.0
    labor_cost: float = 0.0
    overhead_cost: float = 0.0
    retail_price: float = 0.0
    packaging: dict[PackagingCategory, PackagingSelection | None] = Field(default_factory=dict)
    custom_packaging: list[PackagingSelection] = Field(default_factory=list)
    custom_costs: list[CustomCost] = Field(default_factory=list)


class NoteRequest(BaseModel):
    material_id: str
    text: str = Field(..., min_length=1)


class WishlistRequest(BaseModel):
    name: str
    note: str = ""


class FamilyProfileRequest(BaseModel):
    main_character: str = Field(..., min_length=1)
    description: str = ""
