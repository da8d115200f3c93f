"""
Batch reconciler.

Persists each inventory batch of a material independently. A failure on
one batch is recorded and the remaining batches are still processed.
"""

from dataclasses import dataclass, field

from moleculex.config import get_logger
from moleculex.core.entities import InventoryBatch
from moleculex.core.exceptions import StorageError
from moleculex.core.interfaces import IRemoteStore, Relation
from moleculex.core.services.identity_router import WriteKind, adopt_identity, classify
from moleculex.core.services.schema_mapper import batch_to_remote

logger = get_logger(__name__)


@dataclass
class BatchFailure:
    """A batch that could not be written."""

    batch_id: str
    error: str


@dataclass
class ReconcileResult:
    """Outcome of reconciling one material's batches."""

    inserted: int = 0
    updated: int = 0
    failures: list[BatchFailure] = field(default_factory=list)
    batches: list[InventoryBatch] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class BatchReconciler:
    """
    Brings the remote batches of one parent in line with its collection.

    Pending batches are inserted and adopt the store identity; Persisted
    batches are updated. Remote batches absent from the collection are
    left alone.
    """

    def __init__(self, store: IRemoteStore):
        self._store = store

    async def reconcile(self, parent_id: str, batches: list[InventoryBatch]) -> ReconcileResult:
        """
        Write every batch of parent_id, in collection order.

        Args:
            parent_id: Persisted id of the owning material.
            batches: The material's batch collection.

        Returns:
            ReconcileResult with counts, failures, and the batch list where
            created batches carry their new identity.
        """
        result = ReconcileResult()

        for batch in batches:
            row = batch_to_remote(batch, parent_id)
            kind = classify(batch)
            try:
                if kind is WriteKind.CREATION:
                    stored = await self._store.insert(Relation.INVENTORY_BATCHES, row)
                    result.batches.append(adopt_identity(batch, stored))
                    result.inserted += 1
                else:
                    await self._store.update(Relation.INVENTORY_BATCHES, batch.id, row)
                    result.batches.append(batch)
                    result.updated += 1
            except StorageError as e:
                logger.warning(
                    "batch_reconcile_failed",
                    material_id=parent_id,
                    batch_id=batch.id,
                    write_kind=kind.value,
                    error=str(e),
                )
                result.failures.append(BatchFailure(batch_id=batch.id, error=str(e)))
                result.batches.append(batch)

        logger.debug(
            "batches_reconciled",
            material_id=parent_id,
            inserted=result.inserted,
            updated=result.updated,
            failed=len(result.failures),
        )
        return result
