"""
Seed/import engine.

Bulk-loads candidate materials into the remote store, skipping any whose
natural key (CAS number, else exact name) already exists there. Running
it twice over the same candidates inserts nothing the second time.
"""

import asyncio
from dataclasses import dataclass

from moleculex.config import get_logger
from moleculex.core.entities import Material
from moleculex.core.exceptions import StorageError
from moleculex.core.interfaces import IRemoteStore, Relation
from moleculex.core.services.batch_reconciler import BatchReconciler
from moleculex.core.services.schema_mapper import material_to_remote

logger = get_logger(__name__)


@dataclass
class SeedReport:
    """Counts from one seed run."""

    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    batch_failures: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.skipped + self.failed


class SeedEngine:
    """
    Idempotent bulk seeder.

    There is no rollback: a candidate inserted before a later failure stays
    inserted. The engine only writes to the remote store; callers reload
    their in-memory state afterwards.
    """

    def __init__(
        self,
        store: IRemoteStore,
        reconciler: BatchReconciler | None = None,
        concurrency: int = 1,
    ):
        self._store = store
        self._reconciler = reconciler or BatchReconciler(store)
        self._concurrency = max(1, concurrency)

    async def seed(self, candidates: list[Material]) -> SeedReport:
        """
        Seed candidates into the remote store.

        Args:
            candidates: Materials to import, with their batches.

        Returns:
            SeedReport with succeeded, skipped, and failed counts.
        """
        report = SeedReport()
        claimed: set[tuple[str, str]] = set()
        lock = asyncio.Lock()
        semaphore = asyncio.Semaphore(self._concurrency)

        logger.info("seed_started", candidates=len(candidates), concurrency=self._concurrency)

        async def run(candidate: Material) -> None:
            async with semaphore:
                await self._seed_one(candidate, report, claimed, lock)

        if self._concurrency == 1:
            for candidate in candidates:
                await run(candidate)
        else:
            await asyncio.gather(*(run(candidate) for candidate in candidates))

        logger.info(
            "seed_completed",
            succeeded=report.succeeded,
            skipped=report.skipped,
            failed=report.failed,
            batch_failures=report.batch_failures,
        )
        return report

    async def _seed_one(
        self,
        candidate: Material,
        report: SeedReport,
        claimed: set[tuple[str, str]],
        lock: asyncio.Lock,
    ) -> None:
        # Natural-key columns share their names with the domain fields.
        key = candidate.natural_key

        async with lock:
            if key in claimed:
                logger.debug("seed_duplicate_candidate", name=candidate.name, key=key[1])
                report.skipped += 1
                return
            claimed.add(key)

        try:
            existing = await self._store.find_first(Relation.MATERIALS, key[0], key[1])
        except StorageError as e:
            logger.warning("seed_lookup_failed", name=candidate.name, error=str(e))
            await self._release(key, claimed, lock)
            report.failed += 1
            return

        if existing is not None:
            logger.debug("seed_skipped_existing", name=candidate.name, material_id=existing.get("id"))
            report.skipped += 1
            return

        try:
            stored = await self._store.insert(Relation.MATERIALS, material_to_remote(candidate))
        except StorageError as e:
            logger.warning("seed_insert_failed", name=candidate.name, error=str(e))
            await self._release(key, claimed, lock)
            report.failed += 1
            return

        result = await self._reconciler.reconcile(str(stored["id"]), candidate.inventory_batches)
        report.batch_failures += len(result.failures)
        report.succeeded += 1
        logger.debug("seed_inserted", name=candidate.name, material_id=stored["id"])

    @staticmethod
    async def _release(key: tuple[str, str], claimed: set[tuple[str, str]], lock: asyncio.Lock) -> None:
        # A failed candidate leaves its key free for a later duplicate
        async with lock:
            claimed.discard(key)
