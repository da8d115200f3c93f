"""
Built-in catalog of core materials and the sample work built on it.

The core materials seed an empty store. The templates (formulas, finished
products, notes and wishlist items) refer to materials by catalog name and
to formulas by name; `templates()` resolves those names against whatever
the caller currently holds.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from typing import Any

from moleculex.config import get_logger
from moleculex.core.entities import (
    FinishedProduct,
    Formula,
    FormulaIngredient,
    Material,
    ScentNote,
    WishlistItem,
)

logger = get_logger(__name__)

CATALOG_RESOURCE = "core_catalog.json"
TEMPLATES_RESOURCE = "templates.json"


@lru_cache(maxsize=None)
def _load_resource(name: str) -> Any:
    text = resources.files("moleculex.core.services.data").joinpath(name).read_text(encoding="utf-8")
    return json.loads(text)


def core_catalog() -> list[Material]:
    """
    Fresh seed candidates.

    Each call builds new Pending entities, so candidates never share
    identity with a previous run.
    """
    return [Material.model_validate(raw) for raw in _load_resource(CATALOG_RESOURCE)]


@lru_cache(maxsize=1)
def _catalog_keys() -> dict[str, tuple[str, str]]:
    """Catalog name -> natural key of that catalog entry."""
    return {material.name: material.natural_key for material in core_catalog()}


@dataclass
class Templates:
    """Pending template entities with references resolved."""

    formulas: list[Formula] = field(default_factory=list)
    finished_products: list[FinishedProduct] = field(default_factory=list)
    notes: list[ScentNote] = field(default_factory=list)
    wishlist: list[WishlistItem] = field(default_factory=list)


def templates(materials: Iterable[Material], formulas: Iterable[Formula] = ()) -> Templates:
    """
    Build fresh template entities against the caller's collections.

    Args:
        materials: Materials that catalog names resolve to, by natural key.
        formulas: Existing formulas; a product whose formula name matches
            one of these points at it instead of the template formula.

    Material references that resolve to nothing are dropped and logged.
    """
    by_key = {material.natural_key: material.id for material in materials}
    raw = _load_resource(TEMPLATES_RESOURCE)

    def material_id(name: str) -> str | None:
        key = _catalog_keys().get(name, ("name", name))
        resolved = by_key.get(key)
        if resolved is None:
            logger.warning("template_material_unresolved", material=name)
        return resolved

    built = Templates()
    for entry in raw["formulas"]:
        ingredients = []
        for line in entry["ingredients"]:
            resolved = material_id(line["material"])
            if resolved is not None:
                ingredients.append(
                    FormulaIngredient(material_id=resolved, amount=line["amount"], dilution=line["dilution"])
                )
        data = {k: v for k, v in entry.items() if k != "ingredients"}
        built.formulas.append(Formula.model_validate({**data, "ingredients": ingredients}))

    formula_ids = {formula.name: formula.id for formula in built.formulas}
    formula_ids.update({formula.name: formula.id for formula in formulas})
    for entry in raw["finished_products"]:
        data = {k: v for k, v in entry.items() if k != "formula"}
        built.finished_products.append(
            FinishedProduct.model_validate({**data, "formula_id": formula_ids.get(entry["formula"])})
        )

    for entry in raw["notes"]:
        resolved = material_id(entry["material"])
        if resolved is not None:
            built.notes.append(
                ScentNote(material_id=resolved, text=entry["text"], created_at=entry["created_at"])
            )

    built.wishlist = [WishlistItem.model_validate(entry) for entry in raw["wishlist"]]
    return built
