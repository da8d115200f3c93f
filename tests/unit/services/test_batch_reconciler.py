"""Tests for per-batch reconciliation."""

from moleculex.core.entities import InventoryBatch, Persisted
from moleculex.core.interfaces import Relation
from moleculex.core.services.batch_reconciler import BatchReconciler


class TestBatchReconciler:
    """Tests for BatchReconciler.reconcile()."""

    async def test_inserts_pending_and_updates_persisted(self, fake_store):
        fake_store.tables[Relation.INVENTORY_BATCHES].append(
            {"id": "b-old", "material_id": "m1", "quantity_grams": 1}
        )
        batches = [
            InventoryBatch(identity=Persisted(remote_id="b-old"), stock_amount=4),
            InventoryBatch(stock_amount=2),
        ]

        result = await BatchReconciler(fake_store).reconcile("m1", batches)

        assert result.inserted == 1
        assert result.updated == 1
        assert result.ok
        assert all(b.is_persisted for b in result.batches)
        assert fake_store.tables[Relation.INVENTORY_BATCHES][0]["quantity_grams"] == 4

    async def test_rows_reference_parent(self, fake_store):
        await BatchReconciler(fake_store).reconcile("m1", [InventoryBatch(), InventoryBatch()])
        assert {r["material_id"] for r in fake_store.tables[Relation.INVENTORY_BATCHES]} == {"m1"}

    async def test_failure_does_not_stop_remaining_batches(self, fake_store):
        batches = [
            InventoryBatch(batch_number="A"),
            InventoryBatch(batch_number="B"),
            InventoryBatch(batch_number="C"),
        ]
        fake_store.fail_on("insert", Relation.INVENTORY_BATCHES, lambda row: row["batch_code"] == "B")

        result = await BatchReconciler(fake_store).reconcile("m1", batches)

        assert result.inserted == 2
        assert len(result.failures) == 1
        assert result.failures[0].batch_id == batches[1].id
        assert not result.ok
        # Failed batch keeps its pending identity and its position
        assert [b.batch_number for b in result.batches] == ["A", "B", "C"]
        assert not result.batches[1].is_persisted

    async def test_remote_batches_missing_locally_are_kept(self, fake_store):
        fake_store.tables[Relation.INVENTORY_BATCHES].append({"id": "b-gone", "material_id": "m1"})

        await BatchReconciler(fake_store).reconcile("m1", [])

        assert ("delete", Relation.INVENTORY_BATCHES) not in fake_store.calls
        assert len(fake_store.tables[Relation.INVENTORY_BATCHES]) == 1

    async def test_empty_collection(self, fake_store):
        result = await BatchReconciler(fake_store).reconcile("m1", [])
        assert result.inserted == result.updated == 0
        assert result.batches == []
