"""Tests for SQLiteRemoteStore against a migrated temporary database."""

import pytest

from moleculex.core.entities import Formula, FormulaIngredient, Material, Persisted
from moleculex.core.exceptions import DatabaseError, RemoteReadError
from moleculex.core.interfaces import Relation
from moleculex.core.services.schema_mapper import (
    formula_to_domain,
    formula_to_remote,
    material_to_domain,
    material_to_remote,
)


class TestSQLiteRemoteStore:
    """Row-level operations."""

    async def test_insert_assigns_id_and_created_at(self, sqlite_store):
        row = await sqlite_store.insert(Relation.WISHLIST_ITEMS, {"name": "Ambrox", "note": ""})

        assert row["id"]
        assert row["created_at"]
        assert row["name"] == "Ambrox"

    async def test_json_columns_round_trip(self, sqlite_store, sample_material):
        stored = await sqlite_store.insert(Relation.MATERIALS, material_to_remote(sample_material))

        assert stored["roles"] == ["Top Note"]
        assert stored["scent_profile"] == {"citrus": 9.0, "floral": 3.0}
        material = material_to_domain(stored)
        assert material.scent_dna == sample_material.scent_dna
        assert material.is_persisted

    async def test_update(self, sqlite_store):
        row = await sqlite_store.insert(Relation.WISHLIST_ITEMS, {"name": "Ambrox", "note": ""})

        updated = await sqlite_store.update(
            Relation.WISHLIST_ITEMS, row["id"], {"id": "ignored", "name": "Ambroxan", "note": "n"}
        )

        assert updated["id"] == row["id"]
        assert updated["name"] == "Ambroxan"
        assert updated["created_at"] == row["created_at"]

    async def test_update_missing_row_raises(self, sqlite_store):
        with pytest.raises(DatabaseError):
            await sqlite_store.update(Relation.WISHLIST_ITEMS, "nope", {"name": "x"})

    async def test_unknown_column_raises(self, sqlite_store):
        with pytest.raises(DatabaseError):
            await sqlite_store.insert(Relation.WISHLIST_ITEMS, {"name": "x", "colour": "red"})

    async def test_delete(self, sqlite_store):
        row = await sqlite_store.insert(Relation.WISHLIST_ITEMS, {"name": "Ambrox", "note": ""})

        await sqlite_store.delete(Relation.WISHLIST_ITEMS, row["id"])
        await sqlite_store.delete(Relation.WISHLIST_ITEMS, row["id"])

        assert await sqlite_store.select(Relation.WISHLIST_ITEMS) == []

    async def test_select_in_insertion_order_with_filters(self, sqlite_store):
        for name in ("a", "b", "c"):
            await sqlite_store.insert(Relation.NOTES, {"material_id": "m1" if name != "b" else "m2", "content": name})

        all_rows = await sqlite_store.select(Relation.NOTES)
        filtered = await sqlite_store.select(Relation.NOTES, {"material_id": "m1"})

        assert [r["content"] for r in all_rows] == ["a", "b", "c"]
        assert [r["content"] for r in filtered] == ["a", "c"]

    async def test_find_first(self, sqlite_store):
        await sqlite_store.insert(Relation.MATERIALS, {"name": "Linalool", "cas_number": "78-70-6"})

        found = await sqlite_store.find_first(Relation.MATERIALS, "cas_number", "78-70-6")
        missing = await sqlite_store.find_first(Relation.MATERIALS, "name", "Nope")

        assert found["name"] == "Linalool"
        assert missing is None

    async def test_find_first_unknown_column_is_read_error(self, sqlite_store):
        with pytest.raises(RemoteReadError):
            await sqlite_store.find_first(Relation.MATERIALS, "colour", "red")

    async def test_batch_requires_existing_material(self, sqlite_store):
        with pytest.raises(DatabaseError):
            await sqlite_store.insert(Relation.INVENTORY_BATCHES, {"material_id": "ghost"})

    async def test_deleting_material_cascades_to_batches(self, sqlite_store):
        material = await sqlite_store.insert(Relation.MATERIALS, {"name": "Vanillin"})
        await sqlite_store.insert(Relation.INVENTORY_BATCHES, {"material_id": material["id"]})

        await sqlite_store.delete(Relation.MATERIALS, material["id"])

        assert await sqlite_store.select(Relation.INVENTORY_BATCHES) == []

    async def test_formula_ingredients_stored_as_json(self, sqlite_store):
        formula = Formula(
            name="Study",
            ingredients=[FormulaIngredient(material_id="m1", amount=2.5)],
        )
        stored = await sqlite_store.insert(Relation.FORMULAS, formula_to_remote(formula))

        restored = formula_to_domain(stored)

        assert restored.ingredients == formula.ingredients

    async def test_persisted_identity_kept_on_insert(self, sqlite_store):
        material = Material(name="Iso E Super", identity=Persisted(remote_id="fixed-id"))
        stored = await sqlite_store.insert(Relation.MATERIALS, material_to_remote(material))
        assert stored["id"] == "fixed-id"
