"""Core domain entities."""

from moleculex.core.entities.family import (
    DEFAULT_FAMILY_PROFILES,
    FamilyProfile,
    FamilyProfiles,
)
from moleculex.core.entities.formula import (
    EvaluationStatus,
    Formula,
    FormulaEvaluation,
    FormulaIngredient,
    FormulaUnit,
    ProductType,
)
from moleculex.core.entities.identity import (
    IdentifiedModel,
    Identity,
    Pending,
    Persisted,
    Timestamp,
    ensure_utc,
    lift_identity,
)
from moleculex.core.entities.material import (
    DEFAULT_ODOR_STRENGTH,
    FunctionalRole,
    InventoryBatch,
    Material,
    MaterialOrigin,
    NoteRole,
    OlfactiveFamily,
    PhysicalState,
)
from moleculex.core.entities.note import ScentNote, WishlistItem
from moleculex.core.entities.product import (
    CustomCost,
    FinishedProduct,
    PackagingCategory,
    PackagingSelection,
)
from moleculex.core.entities.views import (
    ActivityEvent,
    DashboardStats,
    FamilyShare,
    MaterialView,
    StockSummary,
)

__all__ = [
    # Identity
    "Identity",
    "IdentifiedModel",
    "Pending",
    "Persisted",
    "lift_identity",
    "Timestamp",
    "ensure_utc",
    # Material entities
    "Material",
    "InventoryBatch",
    "OlfactiveFamily",
    "MaterialOrigin",
    "PhysicalState",
    "NoteRole",
    "FunctionalRole",
    "DEFAULT_ODOR_STRENGTH",
    # Formula entities
    "Formula",
    "FormulaIngredient",
    "FormulaEvaluation",
    "FormulaUnit",
    "EvaluationStatus",
    "ProductType",
    # Product entities
    "FinishedProduct",
    "PackagingCategory",
    "PackagingSelection",
    "CustomCost",
    # Notes
    "ScentNote",
    "WishlistItem",
    # Family profiles
    "FamilyProfile",
    "FamilyProfiles",
    "DEFAULT_FAMILY_PROFILES",
    # Views
    "StockSummary",
    "MaterialView",
    "FamilyShare",
    "ActivityEvent",
    "DashboardStats",
]
