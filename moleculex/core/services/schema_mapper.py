"""
Schema mapper between domain entities and remote rows.

The remote store uses its own column names. Every translation between the
two vocabularies lives here; no other module knows the external names.

Reading is tolerant: absent or malformed optional fields fall back to
defaults and unknown enum tags are dropped. A row without an ``id`` is a
mapping defect and raises MissingFieldError.

Writing emits ``id`` and ``created_at`` only for Persisted entities so the
store assigns both on creation.
"""

import json
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any, TypeVar

from moleculex.config import get_logger
from moleculex.core.entities import (
    DEFAULT_ODOR_STRENGTH,
    CustomCost,
    FamilyProfile,
    FinishedProduct,
    Formula,
    FormulaEvaluation,
    FormulaIngredient,
    FormulaUnit,
    FunctionalRole,
    IdentifiedModel,
    InventoryBatch,
    Material,
    MaterialOrigin,
    NoteRole,
    OlfactiveFamily,
    PackagingCategory,
    PackagingSelection,
    Persisted,
    PhysicalState,
    ProductType,
    ScentNote,
    WishlistItem,
)
from moleculex.core.exceptions import MissingFieldError
from moleculex.core.interfaces import Relation, Row

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)


# Tolerant field readers

def _require_id(row: Row, relation: Relation) -> Persisted:
    raw_id = row.get("id")
    if raw_id is None or raw_id == "":
        raise MissingFieldError(relation.value, "id")
    return Persisted(remote_id=str(raw_id))


def _decode_json(value: Any) -> Any:
    if isinstance(value, (str, bytes)):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value


def _as_list(value: Any) -> list:
    value = _decode_json(value)
    return list(value) if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    value = _decode_json(value)
    return dict(value) if isinstance(value, dict) else {}


def _as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_enum(enum_cls: type[E], value: Any) -> E | None:
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _as_enum_list(enum_cls: type[E], value: Any) -> list[E]:
    members = []
    for item in _as_list(value):
        member = _as_enum(enum_cls, item)
        if member is not None and member not in members:
            members.append(member)
    return members


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, str) and value:
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _with_created_at(data: dict[str, Any], row: Row) -> dict[str, Any]:
    created_at = _as_datetime(row.get("created_at"))
    if created_at is not None:
        data["created_at"] = created_at
    return data


def _identity_columns(entity: IdentifiedModel, created_at: datetime | None = None) -> Row:
    if not entity.is_persisted:
        return {}
    columns: Row = {"id": entity.id}
    if created_at is not None:
        columns["created_at"] = created_at.isoformat()
    return columns


# Materials and batches

def batch_to_domain(row: Row) -> InventoryBatch:
    """Translate an inventory_batches row."""
    return InventoryBatch(
        identity=_require_id(row, Relation.INVENTORY_BATCHES),
        batch_number=_as_str(row.get("batch_code")) or "",
        lab=_as_str(row.get("manufacturer")) or "",
        supplier=_as_str(row.get("supplier")) or "",
        purchase_date=_as_date(row.get("purchase_date")),
        stock_amount=max(_as_float(row.get("quantity_grams")), 0.0),
        cost_per_gram=max(_as_float(row.get("unit_cost")), 0.0),
    )


def batch_to_remote(batch: InventoryBatch, material_id: str) -> Row:
    """Translate a batch into an inventory_batches row owned by material_id."""
    return {
        **_identity_columns(batch),
        "material_id": material_id,
        "batch_code": batch.batch_number,
        "manufacturer": batch.lab,
        "supplier": batch.supplier,
        "purchase_date": batch.purchase_date.isoformat() if batch.purchase_date else None,
        "quantity_grams": batch.stock_amount,
        "unit_cost": batch.cost_per_gram,
    }


def material_to_domain(row: Row, batch_rows: list[Row] | None = None) -> Material:
    """Translate a materials row and its batch rows into a Material."""
    identity = _require_id(row, Relation.MATERIALS)
    family = _as_enum(OlfactiveFamily, row.get("family"))
    if family is None:
        logger.debug("unknown_family_defaulted", material_id=identity.remote_id, family=row.get("family"))
        family = OlfactiveFamily.ADDITIVE

    data: dict[str, Any] = {
        "identity": identity,
        "name": _as_str(row.get("name")) or "",
        "olfactive_family": family,
        "origin": _as_enum(MaterialOrigin, row.get("origin")),
        "physical_state": _as_enum(PhysicalState, row.get("physical_state")),
        "note_roles": _as_enum_list(NoteRole, row.get("roles")),
        "functional_roles": _as_enum_list(FunctionalRole, row.get("functional_roles")),
        "cas_number": _as_str(row.get("cas_number")) or None,
        "iupac_name": _as_str(row.get("iupac_name")) or None,
        # The external columns are swapped relative to the domain meaning.
        # Existing data depends on it; do not "fix" one side only.
        "odor_strength": _as_float(row.get("impact")),
        "impact": _as_float(row.get("odor_strength")),
        "odor_strength_default": DEFAULT_ODOR_STRENGTH,
        "scent_dna": {
            str(facet): _as_float(intensity)
            for facet, intensity in _as_dict(row.get("scent_profile")).items()
        },
        "evaporation_curve": [_as_float(point) for point in _as_list(row.get("evaporation_curve"))],
        "synergies": [str(tag) for tag in _as_list(row.get("synergies"))],
        "ifra_max_concentration": _as_float(row.get("ifra_limit"), 100.0),
        "sds_filename": _as_str(row.get("sds_filename")),
        "sds_url": _as_str(row.get("sds_url")),
        "inventory_batches": [batch_to_domain(batch_row) for batch_row in batch_rows or []],
    }
    return Material(**_with_created_at(data, row))


def material_to_remote(material: Material) -> Row:
    """Translate a Material into a materials row. Batches are written separately."""
    return {
        **_identity_columns(material, material.created_at),
        "name": material.name,
        "family": material.olfactive_family.value,
        "origin": material.origin.value if material.origin else None,
        "physical_state": material.physical_state.value if material.physical_state else None,
        "roles": [role.value for role in material.note_roles],
        "functional_roles": [role.value for role in material.functional_roles],
        "cas_number": material.cas_number,
        "iupac_name": material.iupac_name,
        # Swapped on purpose, see material_to_domain.
        "impact": material.odor_strength,
        "odor_strength": material.impact,
        "scent_profile": dict(material.scent_dna),
        "evaporation_curve": list(material.evaporation_curve),
        "synergies": list(material.synergies),
        "ifra_limit": material.ifra_max_concentration,
        "sds_filename": material.sds_filename,
        "sds_url": material.sds_url,
    }


# Notes and wishlist

def note_to_domain(row: Row) -> ScentNote:
    data = {
        "identity": _require_id(row, Relation.NOTES),
        "material_id": _as_str(row.get("material_id")) or "",
        "text": _as_str(row.get("content")) or "",
    }
    return ScentNote(**_with_created_at(data, row))


def note_to_remote(note: ScentNote) -> Row:
    return {
        **_identity_columns(note, note.created_at),
        "material_id": note.material_id,
        "content": note.text,
    }


def wishlist_to_domain(row: Row) -> WishlistItem:
    return WishlistItem(
        identity=_require_id(row, Relation.WISHLIST_ITEMS),
        name=_as_str(row.get("name")) or "",
        note=_as_str(row.get("note")) or "",
    )


def wishlist_to_remote(item: WishlistItem) -> Row:
    return {**_identity_columns(item), "name": item.name, "note": item.note}


# Formulas and products

def _ingredient_to_domain(raw: Any) -> FormulaIngredient | None:
    if not isinstance(raw, dict) or not raw.get("material_id"):
        return None
    return FormulaIngredient(
        material_id=str(raw["material_id"]),
        amount=max(_as_float(raw.get("amount")), 0.0),
        dilution=_as_float(raw.get("dilution"), 100.0),
        solvent_id=_as_str(raw.get("solvent_id")),
    )


def _evaluation_to_domain(raw: Any) -> FormulaEvaluation | None:
    if not isinstance(raw, dict):
        return None
    try:
        return FormulaEvaluation.model_validate(raw)
    except ValueError:
        return None


def formula_to_domain(row: Row) -> Formula:
    """Translate a formulas row. Ingredients and evaluations are JSON columns."""
    ingredients = [_ingredient_to_domain(raw) for raw in _as_list(row.get("ingredients"))]
    evaluations = [_evaluation_to_domain(raw) for raw in _as_list(row.get("evaluations"))]
    data = {
        "identity": _require_id(row, Relation.FORMULAS),
        "name": _as_str(row.get("name")) or "",
        "unit": _as_enum(FormulaUnit, row.get("unit")) or FormulaUnit.WEIGHT,
        "final_dilution": _as_float(row.get("final_dilution"), 100.0),
        "product_type": _as_enum(ProductType, row.get("product_type")),
        "custom_product_type": _as_str(row.get("custom_product_type")),
        "ingredients": [i for i in ingredients if i is not None],
        "notes": _as_str(row.get("notes")),
        "evaluations": [e for e in evaluations if e is not None],
        "mood": _as_str(row.get("mood")),
    }
    return Formula(**_with_created_at(data, row))


def formula_to_remote(formula: Formula) -> Row:
    return {
        **_identity_columns(formula, formula.created_at),
        "name": formula.name,
        "unit": formula.unit.value,
        "final_dilution": formula.final_dilution,
        "product_type": formula.product_type.value if formula.product_type else None,
        "custom_product_type": formula.custom_product_type,
        "ingredients": [i.model_dump(mode="json") for i in formula.ingredients],
        "notes": formula.notes,
        "evaluations": [e.model_dump(mode="json") for e in formula.evaluations],
        "mood": formula.mood,
    }


def _selection_to_domain(raw: Any) -> PackagingSelection | None:
    if not isinstance(raw, dict):
        return None
    try:
        return PackagingSelection.model_validate(raw)
    except ValueError:
        return None


def product_to_domain(row: Row) -> FinishedProduct:
    """Translate a finished_products row."""
    packaging: dict[PackagingCategory, PackagingSelection | None] = {}
    for category, raw in _as_dict(row.get("packaging")).items():
        member = _as_enum(PackagingCategory, category)
        if member is not None:
            packaging[member] = _selection_to_domain(raw)

    custom_packaging = [_selection_to_domain(raw) for raw in _as_list(row.get("custom_packaging"))]
    custom_costs = []
    for raw in _as_list(row.get("custom_costs")):
        try:
            custom_costs.append(CustomCost.model_validate(raw))
        except ValueError:
            continue

    data = {
        "identity": _require_id(row, Relation.FINISHED_PRODUCTS),
        "name": _as_str(row.get("name")) or "",
        "formula_id": _as_str(row.get("formula_id")),
        "bottle_size": _as_float(row.get("bottle_size")),
        "concentration": _as_float(row.get("concentration")),
        "alcohol_cost_per_kg": _as_float(row.get("alcohol_cost_per_kg")),
        "labor_cost": _as_float(row.get("labor_cost")),
        "overhead_cost": _as_float(row.get("overhead_cost")),
        "retail_price": _as_float(row.get("retail_price")),
        "packaging": packaging,
        "custom_packaging": [p for p in custom_packaging if p is not None],
        "custom_costs": custom_costs,
    }
    return FinishedProduct(**_with_created_at(data, row))


def product_to_remote(product: FinishedProduct) -> Row:
    return {
        **_identity_columns(product, product.created_at),
        "name": product.name,
        "formula_id": product.formula_id,
        "bottle_size": product.bottle_size,
        "concentration": product.concentration,
        "alcohol_cost_per_kg": product.alcohol_cost_per_kg,
        "labor_cost": product.labor_cost,
        "overhead_cost": product.overhead_cost,
        "retail_price": product.retail_price,
        "packaging": {
            category.value: selection.model_dump(mode="json") if selection else None
            for category, selection in product.packaging.items()
        },
        "custom_packaging": [p.model_dump(mode="json") for p in product.custom_packaging],
        "custom_costs": [c.model_dump(mode="json") for c in product.custom_costs],
    }


# Family profiles

def family_profile_to_domain(row: Row) -> tuple[OlfactiveFamily, FamilyProfile] | None:
    """Translate a family_profiles row. Rows for unknown families yield None."""
    family = _as_enum(OlfactiveFamily, row.get("family"))
    if family is None:
        return None
    return family, FamilyProfile(
        main_character=_as_str(row.get("main_character")) or "",
        description=_as_str(row.get("description")) or "",
    )


def family_profile_to_remote(family: OlfactiveFamily, profile: FamilyProfile) -> Row:
    return {
        "family": family.value,
        "main_character": profile.main_character,
        "description": profile.description,
    }
