"""
Aggregate calculator.

Pure functions deriving read-only views from the domain collections.
Nothing here raises on empty input or zero denominators.
"""

from collections.abc import Iterable, Sequence

from moleculex.core.entities import (
    ActivityEvent,
    DashboardStats,
    FamilyShare,
    Formula,
    InventoryBatch,
    Material,
    MaterialView,
    OlfactiveFamily,
    ScentNote,
    StockSummary,
)

RECENT_ACTIVITY_LIMIT = 5
TOP_FAMILIES_LIMIT = 4
RECENT_FORMULAS_LIMIT = 6


def stock_summary(batches: Iterable[InventoryBatch]) -> StockSummary:
    """Total stock, total value, and average cost per gram (0 when out of stock)."""
    total_stock = 0.0
    total_value = 0.0
    for batch in batches:
        total_stock += batch.stock_amount
        total_value += batch.stock_amount * batch.cost_per_gram

    avg_cost = total_value / total_stock if total_stock > 0 else 0.0
    return StockSummary(
        total_stock=total_stock,
        total_value=total_value,
        avg_cost_per_gram=avg_cost,
    )


def material_view(material: Material) -> MaterialView:
    return MaterialView(material=material, stock=stock_summary(material.inventory_batches))


def material_views(materials: Iterable[Material]) -> list[MaterialView]:
    return [material_view(m) for m in materials]


def dashboard_stats(materials: Sequence[Material], formulas: Sequence[Formula]) -> DashboardStats:
    inventory_value = sum(stock_summary(m.inventory_batches).total_value for m in materials)
    return DashboardStats(
        total_materials=len(materials),
        total_inventory_value=inventory_value,
        total_formulas=len(formulas),
    )


def family_distribution(formula: Formula, materials: Iterable[Material]) -> list[FamilyShare]:
    """
    Weight of each olfactive family in a formula.

    Ingredients whose material is unknown still count towards the total.
    Sorted by weight descending; ties keep first-encountered order.
    """
    families_by_id = {m.id: m.olfactive_family for m in materials}
    total = formula.total_amount or 1

    weights: dict[OlfactiveFamily, float] = {}
    for ingredient in formula.ingredients:
        family = families_by_id.get(ingredient.material_id)
        if family is None:
            continue
        weights[family] = weights.get(family, 0.0) + ingredient.amount

    shares = [FamilyShare(family=f, weight=amount / total) for f, amount in weights.items()]
    # sorted() is stable, so ties keep insertion order
    return sorted(shares, key=lambda share: share.weight, reverse=True)


def top_families(
    formula: Formula,
    materials: Iterable[Material],
    limit: int = TOP_FAMILIES_LIMIT,
) -> list[FamilyShare]:
    return family_distribution(formula, materials)[:limit]


def activity_feed(
    materials: Iterable[Material],
    formulas: Iterable[Formula],
    notes: Iterable[ScentNote],
    limit: int | None = None,
) -> list[ActivityEvent]:
    """Creation events across materials, formulas, and notes, newest first."""
    events = [
        ActivityEvent(kind="material", entity_id=m.id, title=m.name, occurred_at=m.created_at)
        for m in materials
    ]
    events.extend(
        ActivityEvent(kind="formula", entity_id=f.id, title=f.name, occurred_at=f.created_at)
        for f in formulas
    )
    events.extend(
        ActivityEvent(kind="note", entity_id=n.id, title=n.text, occurred_at=n.created_at)
        for n in notes
    )
    events.sort(key=lambda event: event.occurred_at, reverse=True)
    return events if limit is None else events[:limit]


def recent_formulas(formulas: Iterable[Formula], limit: int = RECENT_FORMULAS_LIMIT) -> list[Formula]:
    return sorted(formulas, key=lambda f: f.created_at, reverse=True)[:limit]
