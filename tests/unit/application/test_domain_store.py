"""Tests for DomainStore orchestration over a fake remote store."""

import json

import pytest

from moleculex.application.domain_store import DomainStore
from moleculex.core.entities import (
    FamilyProfile,
    FinishedProduct,
    Formula,
    FormulaIngredient,
    InventoryBatch,
    Material,
    OlfactiveFamily,
    Persisted,
    ScentNote,
)
from moleculex.core.exceptions import (
    EntityNotFoundError,
    RemoteReadError,
    RemoteWriteError,
    SnapshotParseError,
)
from moleculex.core.interfaces import Relation
from moleculex.core.services.identity_router import WriteKind


class TestLoad:
    """Tests for DomainStore.load()."""

    async def test_builds_collections_from_rows(self, fake_store, domain_store):
        fake_store.tables[Relation.MATERIALS].append({"id": "m1", "name": "Hedione", "family": "Floral"})
        fake_store.tables[Relation.INVENTORY_BATCHES].extend(
            [
                {"id": "b1", "material_id": "m1", "quantity_grams": 10, "unit_cost": 1},
                {"id": "b2", "material_id": "ghost", "quantity_grams": 1},
            ]
        )
        fake_store.tables[Relation.NOTES].append({"id": "n1", "material_id": "m1", "content": "Radiant"})
        fake_store.tables[Relation.FAMILY_PROFILES].append(
            {"id": "fp1", "family": "Floral", "main_character": "Petals", "description": "d"}
        )

        await domain_store.load()

        assert [m.id for m in domain_store.materials] == ["m1"]
        assert [b.id for b in domain_store.materials[0].inventory_batches] == ["b1"]
        assert domain_store.notes[0].text == "Radiant"
        assert domain_store.family_profiles.get(OlfactiveFamily.FLORAL).main_character == "Petals"

    async def test_failed_read_keeps_previous_state(self, fake_store, domain_store, sample_material):
        await domain_store.save_material(sample_material)
        fake_store.fail_on("select", Relation.NOTES)

        with pytest.raises(RemoteReadError):
            await domain_store.load()

        assert len(domain_store.materials) == 1


class TestSaveMaterial:
    """Tests for DomainStore.save_material()."""

    async def test_new_material_is_created(self, fake_store, domain_store, sample_material):
        result = await domain_store.save_material(sample_material)

        assert result.created
        assert result.write_kind is WriteKind.CREATION
        assert result.entity.is_persisted
        assert result.entity.id == fake_store.tables[Relation.MATERIALS][0]["id"]
        assert domain_store.materials == (result.entity,)

    async def test_batches_inserted_with_parent(self, fake_store, domain_store, sample_material):
        result = await domain_store.save_material(sample_material)

        assert result.batches.inserted == 1
        assert result.entity.inventory_batches[0].is_persisted
        assert fake_store.tables[Relation.INVENTORY_BATCHES][0]["material_id"] == result.entity.id

    async def test_second_save_updates(self, fake_store, domain_store, sample_material):
        created = (await domain_store.save_material(sample_material)).entity
        edited = created.model_copy(update={"name": "Bergamot FCF"})

        result = await domain_store.save_material(edited)

        assert result.write_kind is WriteKind.MUTATION
        assert result.batches.updated == 1
        assert len(fake_store.tables[Relation.MATERIALS]) == 1
        assert fake_store.tables[Relation.MATERIALS][0]["name"] == "Bergamot FCF"

    async def test_failed_create_keeps_pending_copy(self, fake_store, domain_store, sample_material):
        fake_store.fail_on("insert", Relation.MATERIALS)

        with pytest.raises(RemoteWriteError):
            await domain_store.save_material(sample_material)

        assert domain_store.materials[0].id == sample_material.id
        assert not domain_store.materials[0].is_persisted

        # Retrying creates it
        result = await domain_store.save_material(domain_store.materials[0])
        assert result.created

    async def test_batch_failure_reported_not_raised(self, fake_store, domain_store, sample_material):
        fake_store.fail_on("insert", Relation.INVENTORY_BATCHES)

        result = await domain_store.save_material(sample_material)

        assert result.entity.is_persisted
        assert len(result.batches.failures) == 1
        assert not domain_store.materials[0].inventory_batches[0].is_persisted

    async def test_references_follow_new_identity(self, domain_store, sample_material):
        await domain_store.save_note(ScentNote(material_id=sample_material.id, text="Sparkling"))
        await domain_store.save_formula(
            Formula(name="F", ingredients=[FormulaIngredient(material_id=sample_material.id, amount=2)])
        )

        saved = (await domain_store.save_material(sample_material)).entity

        assert domain_store.notes_for(saved.id)[0].text == "Sparkling"
        assert domain_store.formulas[0].ingredients[0].material_id == saved.id

    async def test_add_batch(self, fake_store, domain_store, sample_material):
        saved = (await domain_store.save_material(sample_material)).entity

        result = await domain_store.add_batch(saved.id, InventoryBatch(stock_amount=3, cost_per_gram=1))

        assert len(result.entity.inventory_batches) == 2
        assert result.batches.inserted == 1
        assert len(fake_store.tables[Relation.INVENTORY_BATCHES]) == 2


class TestDeletes:
    async def test_delete_material_removes_batches_keeps_notes(self, fake_store, domain_store, sample_material):
        saved = (await domain_store.save_material(sample_material)).entity
        await domain_store.save_note(ScentNote(material_id=saved.id, text="Keep me"))

        await domain_store.delete_material(saved.id)

        assert domain_store.materials == ()
        assert fake_store.tables[Relation.MATERIALS] == []
        assert fake_store.tables[Relation.INVENTORY_BATCHES] == []
        assert len(domain_store.notes) == 1

    async def test_failed_batch_delete_keeps_material(self, fake_store, domain_store):
        material = Material(
            name="Vetiver",
            inventory_batches=[InventoryBatch(stock_amount=1), InventoryBatch(stock_amount=2)],
        )
        saved = (await domain_store.save_material(material)).entity
        second_batch = saved.inventory_batches[1]
        fake_store.fail_on("delete", Relation.INVENTORY_BATCHES, second_batch.id)

        with pytest.raises(RemoteWriteError):
            await domain_store.delete_material(saved.id)

        kept = domain_store.get_material(saved.id)
        assert [b.id for b in kept.inventory_batches] == [second_batch.id]
        assert len(fake_store.tables[Relation.MATERIALS]) == 1

        await domain_store.load()
        assert [b.id for b in domain_store.get_material(saved.id).inventory_batches] == [second_batch.id]

    async def test_failed_material_delete_keeps_material(self, fake_store, domain_store, sample_material):
        saved = (await domain_store.save_material(sample_material)).entity
        fake_store.fail_on("delete", Relation.MATERIALS, saved.id)

        with pytest.raises(RemoteWriteError):
            await domain_store.delete_material(saved.id)

        assert domain_store.get_material(saved.id).inventory_batches == []
        await domain_store.load()
        assert [m.id for m in domain_store.materials] == [saved.id]

    async def test_failed_note_delete_keeps_note(self, fake_store, domain_store):
        note = (await domain_store.save_note(ScentNote(material_id="m-1", text="Dry down"))).entity
        fake_store.fail_on("delete", Relation.NOTES, note.id)

        with pytest.raises(RemoteWriteError):
            await domain_store.delete_note(note.id)

        assert [n.id for n in domain_store.notes] == [note.id]

    async def test_delete_pending_never_calls_store(self, fake_store, domain_store):
        formula = Formula(name="Draft")
        fake_store.fail_on("insert", Relation.FORMULAS)
        with pytest.raises(RemoteWriteError):
            await domain_store.save_formula(formula)

        await domain_store.delete_formula(formula.id)

        assert ("delete", Relation.FORMULAS) not in fake_store.calls
        assert domain_store.formulas == ()

    async def test_delete_unknown_raises(self, domain_store):
        with pytest.raises(EntityNotFoundError):
            await domain_store.delete_product("nope")


class TestFormulasAndProducts:
    async def test_product_follows_formula_identity(self, fake_store, domain_store):
        formula = Formula(name="Base")
        await domain_store.save_product(FinishedProduct(name="50ml", formula_id=formula.id))

        saved = (await domain_store.save_formula(formula)).entity

        assert domain_store.finished_products[0].formula_id == saved.id
        assert fake_store.tables[Relation.FINISHED_PRODUCTS][0]["formula_id"] == saved.id

    async def test_top_families(self, domain_store):
        citrus = (await domain_store.save_material(Material(name="Lemon", olfactive_family=OlfactiveFamily.CITRUS))).entity
        wood = (await domain_store.save_material(Material(name="Cedar", olfactive_family=OlfactiveFamily.WOODY))).entity
        formula = (
            await domain_store.save_formula(
                Formula(
                    name="F",
                    ingredients=[
                        FormulaIngredient(material_id=citrus.id, amount=7),
                        FormulaIngredient(material_id=wood.id, amount=3),
                    ],
                )
            )
        ).entity

        top = domain_store.top_families(formula.id)

        assert top[0].family == OlfactiveFamily.CITRUS
        assert top[0].weight == 0.7


class TestNotesAndWishlist:
    async def test_new_notes_go_first(self, domain_store):
        await domain_store.save_note(ScentNote(material_id="m", text="first"))
        await domain_store.save_note(ScentNote(material_id="m", text="second"))
        assert [n.text for n in domain_store.notes] == ["second", "first"]

    async def test_blank_wishlist_name_ignored(self, fake_store, domain_store):
        assert await domain_store.add_wishlist_item("   ") is None
        assert domain_store.wishlist == ()
        assert fake_store.calls == []

    async def test_wishlist_add_and_remove(self, fake_store, domain_store):
        item = await domain_store.add_wishlist_item("Ambroxan", "for the amber base")
        assert item.is_persisted

        await domain_store.remove_wishlist_item(item.id)

        assert domain_store.wishlist == ()
        assert fake_store.tables[Relation.WISHLIST_ITEMS] == []


class TestFamilyProfiles:
    async def test_update_inserts_then_updates(self, fake_store, domain_store):
        profile = FamilyProfile(main_character="Zesty", description="")
        await domain_store.update_family_profile(OlfactiveFamily.CITRUS, profile)
        await domain_store.update_family_profile(
            OlfactiveFamily.CITRUS, FamilyProfile(main_character="Sharp", description="")
        )

        rows = fake_store.tables[Relation.FAMILY_PROFILES]
        assert len(rows) == 1
        assert rows[0]["main_character"] == "Sharp"
        assert domain_store.family_profiles.get(OlfactiveFamily.CITRUS).main_character == "Sharp"


class TestBulkOperations:
    async def test_seed_twice_is_idempotent(self, fake_store, domain_store):
        candidates = [Material(name="Linalool", cas_number="78-70-6"), Material(name="Fig Accord")]

        first = await domain_store.seed_core_catalog(candidates)
        second = await domain_store.seed_core_catalog(
            [Material(name="Linalool", cas_number="78-70-6"), Material(name="Fig Accord")]
        )

        assert first.succeeded == 2
        assert second.skipped == 2
        assert len(domain_store.materials) == 2
        assert all(m.is_persisted for m in domain_store.materials)

    async def test_restore_templates_skips_present(self, domain_store):
        added = domain_store.restore_templates()
        again = domain_store.restore_templates()

        assert len(added.materials) > 0
        assert len(added.formulas) == 6
        assert len(added.finished_products) == 3
        assert len(added.notes) == 3
        assert len(added.wishlist) == 3
        assert again.total == 0
        assert len(domain_store.materials) == len(added.materials)
        assert len(domain_store.formulas) == 6

    async def test_restored_templates_reference_held_entities(self, domain_store):
        domain_store.restore_templates()

        material_ids = {m.id for m in domain_store.materials}
        formula_ids = {f.id for f in domain_store.formulas}
        assert all(
            ingredient.material_id in material_ids
            for formula in domain_store.formulas
            for ingredient in formula.ingredients
        )
        assert all(product.formula_id in formula_ids for product in domain_store.finished_products)
        assert all(note.material_id in material_ids for note in domain_store.notes)

    async def test_restore_templates_reuses_present_material_and_formula(self, domain_store):
        bergamot = (
            await domain_store.save_material(Material(name="My Bergamot", cas_number="8007-75-8"))
        ).entity
        mine = (await domain_store.save_formula(Formula(name="Summer Citrus"))).entity

        restored = domain_store.restore_templates()

        assert all(m.natural_key != bergamot.natural_key for m in restored.materials)
        assert "Summer Citrus" not in {f.name for f in restored.formulas}
        summer = next(p for p in restored.finished_products if p.name.startswith("Summer Citrus"))
        assert summer.formula_id == mine.id
        barber = next(f for f in restored.formulas if f.name == "Modern Barber")
        assert bergamot.id in {i.material_id for i in barber.ingredients}

    async def test_clear_all_keeps_profiles(self, domain_store, sample_material):
        await domain_store.save_material(sample_material)
        await domain_store.update_family_profile(
            OlfactiveFamily.MUSK, FamilyProfile(main_character="Skin", description="")
        )

        domain_store.clear_all()

        assert domain_store.materials == ()
        assert domain_store.family_profiles.get(OlfactiveFamily.MUSK).main_character == "Skin"


class TestSnapshots:
    async def test_export_then_import_restores_state(self, domain_store, sample_material):
        await domain_store.save_material(sample_material)
        raw = domain_store.export_snapshot_json()

        fresh = DomainStore(domain_store._store)
        patch = fresh.import_snapshot(raw)

        assert "materials" in patch.present_fields()
        assert fresh.materials == domain_store.materials

    def test_import_replaces_only_present_fields(self, domain_store):
        domain_store.restore_templates()
        count = len(domain_store.materials)

        domain_store.import_snapshot(json.dumps({"wishlist": [{"name": "Orris butter"}]}))

        assert len(domain_store.materials) == count
        assert domain_store.wishlist[0].name == "Orris butter"

    def test_invalid_import_applies_nothing(self, domain_store):
        domain_store.restore_templates()
        before = domain_store.materials
        wishlist = domain_store.wishlist

        with pytest.raises(SnapshotParseError):
            domain_store.import_snapshot('{"wishlist": [], "materials": [{"id": 1}]}')

        assert domain_store.materials == before
        assert domain_store.wishlist == wishlist

    def test_import_with_repeated_ids_applies_nothing(self, domain_store):
        with pytest.raises(SnapshotParseError):
            domain_store.import_snapshot({"materials": [{"id": "abc", "name": "A"}, {"id": "abc", "name": "B"}]})

        assert domain_store.materials == ()


class TestViews:
    async def test_dashboard_and_activity(self, domain_store, sample_material):
        await domain_store.save_material(sample_material)
        await domain_store.save_formula(Formula(name="F"))

        stats = domain_store.dashboard_stats()

        assert stats.total_materials == 1
        assert stats.total_formulas == 1
        assert stats.total_inventory_value == 5.0
        assert len(domain_store.recent_activity()) == 2

    def test_get_missing_material(self, domain_store):
        with pytest.raises(EntityNotFoundError):
            domain_store.material_view("missing")

    def test_persisted_entity_lookup(self, domain_store):
        domain_store.import_snapshot({"materials": [{"id": "abc", "name": "Vanillin"}]})
        assert domain_store.get_material("abc").identity == Persisted(remote_id="abc")
