"""
Domain store.

Owns the canonical in-memory collections and keeps them synchronized with
the remote store. Every save updates memory first and then persists; a
failed remote write keeps the in-memory edit and raises RemoteWriteError,
so the entity stays Pending (or stale) and is retried on its next save.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from moleculex.config import get_logger
from moleculex.core.entities import (
    ActivityEvent,
    DashboardStats,
    FamilyProfile,
    FamilyProfiles,
    FamilyShare,
    FinishedProduct,
    Formula,
    IdentifiedModel,
    InventoryBatch,
    Material,
    MaterialView,
    OlfactiveFamily,
    ScentNote,
    WishlistItem,
)
from moleculex.core.exceptions import EntityNotFoundError, RemoteWriteError, StorageError
from moleculex.core.interfaces import IRemoteStore, Relation, Row
from moleculex.core.services import aggregates
from moleculex.core.services.batch_reconciler import BatchReconciler, ReconcileResult
from moleculex.core.services.identity_router import WriteKind, adopt_identity, classify
from moleculex.core.services.schema_mapper import (
    family_profile_to_domain,
    family_profile_to_remote,
    formula_to_domain,
    formula_to_remote,
    material_to_domain,
    material_to_remote,
    note_to_domain,
    note_to_remote,
    product_to_domain,
    product_to_remote,
    wishlist_to_domain,
    wishlist_to_remote,
)
from moleculex.core.services.seed_catalog import core_catalog, templates
from moleculex.core.services.seed_engine import SeedEngine, SeedReport
from moleculex.core.services.snapshot_codec import SnapshotCodec, SnapshotDocument, SnapshotPatch

logger = get_logger(__name__)

T = TypeVar("T", bound=IdentifiedModel)


@dataclass
class SaveResult(Generic[T]):
    """Outcome of a successful save."""

    entity: T
    write_kind: WriteKind
    batches: ReconcileResult | None = None

    @property
    def created(self) -> bool:
        return self.write_kind is WriteKind.CREATION


@dataclass
class RestoredTemplates:
    """Entities restore_templates() added to memory."""

    materials: list[Material]
    formulas: list[Formula]
    finished_products: list[FinishedProduct]
    notes: list[ScentNote]
    wishlist: list[WishlistItem]

    @property
    def total(self) -> int:
        return (
            len(self.materials)
            + len(self.formulas)
            + len(self.finished_products)
            + len(self.notes)
            + len(self.wishlist)
        )


def _index_of(items: list[T], entity_id: str) -> int | None:
    for i, item in enumerate(items):
        if item.id == entity_id:
            return i
    return None


def _upsert(items: list[T], entity: T, *, prepend: bool = False) -> None:
    index = _index_of(items, entity.id)
    if index is not None:
        items[index] = entity
    elif prepend:
        items.insert(0, entity)
    else:
        items.append(entity)


def _replace(items: list[T], old_id: str, entity: T) -> None:
    index = _index_of(items, old_id)
    if index is not None:
        items[index] = entity


class DomainStore:
    """
    Orchestrates the domain collections and their persistence.

    Collections are exposed as tuples; callers never mutate them directly.
    Mutations are serialized through an asyncio lock.
    """

    def __init__(
        self,
        store: IRemoteStore,
        family_profiles: FamilyProfiles | None = None,
        *,
        reconciler: BatchReconciler | None = None,
        seed_engine: SeedEngine | None = None,
        codec: SnapshotCodec | None = None,
        recent_activity_limit: int = aggregates.RECENT_ACTIVITY_LIMIT,
        top_families_limit: int = aggregates.TOP_FAMILIES_LIMIT,
        recent_formulas_limit: int = aggregates.RECENT_FORMULAS_LIMIT,
    ):
        self._store = store
        self._reconciler = reconciler or BatchReconciler(store)
        self._seed_engine = seed_engine or SeedEngine(store, self._reconciler)
        self._codec = codec or SnapshotCodec()
        self._recent_activity_limit = recent_activity_limit
        self._top_families_limit = top_families_limit
        self._recent_formulas_limit = recent_formulas_limit
        self._lock = asyncio.Lock()

        self._materials: list[Material] = []
        self._formulas: list[Formula] = []
        self._products: list[FinishedProduct] = []
        self._notes: list[ScentNote] = []
        self._wishlist: list[WishlistItem] = []
        self._family_profiles = family_profiles or FamilyProfiles.defaults()

    # Collections

    @property
    def materials(self) -> tuple[Material, ...]:
        return tuple(self._materials)

    @property
    def formulas(self) -> tuple[Formula, ...]:
        return tuple(self._formulas)

    @property
    def finished_products(self) -> tuple[FinishedProduct, ...]:
        return tuple(self._products)

    @property
    def notes(self) -> tuple[ScentNote, ...]:
        return tuple(self._notes)

    @property
    def wishlist(self) -> tuple[WishlistItem, ...]:
        return tuple(self._wishlist)

    @property
    def family_profiles(self) -> FamilyProfiles:
        return self._family_profiles

    def get_material(self, material_id: str) -> Material:
        index = _index_of(self._materials, material_id)
        if index is None:
            raise EntityNotFoundError("material", material_id)
        return self._materials[index]

    def get_formula(self, formula_id: str) -> Formula:
        index = _index_of(self._formulas, formula_id)
        if index is None:
            raise EntityNotFoundError("formula", formula_id)
        return self._formulas[index]

    def get_product(self, product_id: str) -> FinishedProduct:
        index = _index_of(self._products, product_id)
        if index is None:
            raise EntityNotFoundError("product", product_id)
        return self._products[index]

    # Loading

    async def load(self) -> None:
        """
        Rebuild every collection from the remote store.

        Nothing is replaced unless all relations were read and mapped.
        """
        async with self._lock:
            material_rows = await self._store.select(Relation.MATERIALS)
            batch_rows = await self._store.select(Relation.INVENTORY_BATCHES)
            formula_rows = await self._store.select(Relation.FORMULAS)
            product_rows = await self._store.select(Relation.FINISHED_PRODUCTS)
            note_rows = await self._store.select(Relation.NOTES)
            wishlist_rows = await self._store.select(Relation.WISHLIST_ITEMS)
            profile_rows = await self._store.select(Relation.FAMILY_PROFILES)

            batches_by_material: dict[str, list[Row]] = {}
            for row in batch_rows:
                batches_by_material.setdefault(str(row.get("material_id")), []).append(row)

            materials = [
                material_to_domain(row, batches_by_material.pop(str(row.get("id")), []))
                for row in material_rows
            ]
            if batches_by_material:
                logger.warning(
                    "orphan_batches_ignored",
                    material_ids=sorted(batches_by_material.keys()),
                )

            overrides: dict[OlfactiveFamily, FamilyProfile] = {}
            for row in profile_rows:
                mapped = family_profile_to_domain(row)
                if mapped is not None:
                    overrides[mapped[0]] = mapped[1]

            self._materials = materials
            self._formulas = [formula_to_domain(row) for row in formula_rows]
            self._products = [product_to_domain(row) for row in product_rows]
            self._notes = [note_to_domain(row) for row in note_rows]
            self._wishlist = [wishlist_to_domain(row) for row in wishlist_rows]
            self._family_profiles = FamilyProfiles.defaults().with_overrides(overrides)

        logger.info(
            "domain_loaded",
            materials=len(self._materials),
            formulas=len(self._formulas),
            products=len(self._products),
            notes=len(self._notes),
            wishlist=len(self._wishlist),
            profile_overrides=len(overrides),
        )

    # Persistence helpers

    async def _persist(
        self, relation: Relation, entity: T, to_remote: Callable[[T], Row]
    ) -> tuple[T, WriteKind]:
        kind = classify(entity)
        row = to_remote(entity)
        try:
            if kind is WriteKind.CREATION:
                stored = await self._store.insert(relation, row)
                entity = adopt_identity(entity, stored)
            else:
                await self._store.update(relation, entity.id, row)
        except StorageError as e:
            logger.warning(
                "remote_write_failed",
                relation=relation.value,
                entity_id=entity.id,
                write_kind=kind.value,
                error=e.message,
            )
            raise RemoteWriteError(relation.value, entity.id, e.message) from e
        return entity, kind

    async def _remove(self, relation: Relation, entity: IdentifiedModel) -> None:
        if not entity.is_persisted:
            return
        try:
            await self._store.delete(relation, entity.id)
        except StorageError as e:
            logger.warning("remote_delete_failed", relation=relation.value, entity_id=entity.id, error=e.message)
            raise RemoteWriteError(relation.value, entity.id, e.message) from e

    async def _repoint_material(self, old_id: str, new_id: str) -> None:
        """Point notes and formula ingredients at a material's new identity."""
        for i, note in enumerate(self._notes):
            if note.material_id == old_id:
                self._notes[i] = note.model_copy(update={"material_id": new_id})
                await self._push_repointed(Relation.NOTES, self._notes[i], note_to_remote)

        for i, formula in enumerate(self._formulas):
            if not any(ing.material_id == old_id for ing in formula.ingredients):
                continue
            ingredients = [
                ing.model_copy(update={"material_id": new_id}) if ing.material_id == old_id else ing
                for ing in formula.ingredients
            ]
            self._formulas[i] = formula.model_copy(update={"ingredients": ingredients})
            await self._push_repointed(Relation.FORMULAS, self._formulas[i], formula_to_remote)

    async def _push_repointed(
        self, relation: Relation, entity: T, to_remote: Callable[[T], Row]
    ) -> None:
        # Pending entities pick up the new reference on their own next save
        if not entity.is_persisted:
            return
        try:
            await self._store.update(relation, entity.id, to_remote(entity))
        except StorageError as e:
            logger.warning("reference_update_failed", relation=relation.value, entity_id=entity.id, error=e.message)

    # Materials

    async def save_material(self, material: Material) -> SaveResult[Material]:
        """
        Save a material and reconcile its batches.

        Raises:
            RemoteWriteError: If the material row could not be written. The
                in-memory edit is kept. Batch failures are reported in the
                result instead.
        """
        async with self._lock:
            _upsert(self._materials, material)
            old_id = material.id

            material, kind = await self._persist(Relation.MATERIALS, material, material_to_remote)
            _replace(self._materials, old_id, material)
            if kind is WriteKind.CREATION:
                await self._repoint_material(old_id, material.id)

            result = await self._reconciler.reconcile(material.id, list(material.inventory_batches))
            material = material.model_copy(update={"inventory_batches": result.batches})
            _replace(self._materials, material.id, material)

        logger.info(
            "material_saved",
            material_id=material.id,
            write_kind=kind.value,
            batches_inserted=result.inserted,
            batches_updated=result.updated,
            batch_failures=len(result.failures),
        )
        return SaveResult(entity=material, write_kind=kind, batches=result)

    async def delete_material(self, material_id: str) -> None:
        """
        Remove a material. Its batches go with it; notes are kept.

        The material leaves memory only once its remote rows are gone. If a
        batch delete fails, the material stays with the batches not yet
        deleted.

        Raises:
            EntityNotFoundError: If no material has this id.
            RemoteWriteError: If a remote delete fails.
        """
        async with self._lock:
            material = self.get_material(material_id)
            remaining = list(material.inventory_batches)
            try:
                while remaining:
                    await self._remove(Relation.INVENTORY_BATCHES, remaining[0])
                    remaining.pop(0)
                await self._remove(Relation.MATERIALS, material)
            except RemoteWriteError:
                if len(remaining) != len(material.inventory_batches):
                    _upsert(self._materials, material.model_copy(update={"inventory_batches": remaining}))
                raise
            self._materials.remove(material)
        logger.info("material_deleted", material_id=material_id)

    async def add_batch(self, material_id: str, batch: InventoryBatch) -> SaveResult[Material]:
        """Append a batch to a material and save it."""
        material = self.get_material(material_id)
        updated = material.model_copy(
            update={"inventory_batches": [*material.inventory_batches, batch]}
        )
        return await self.save_material(updated)

    # Formulas and products

    async def save_formula(self, formula: Formula) -> SaveResult[Formula]:
        async with self._lock:
            _upsert(self._formulas, formula)
            old_id = formula.id
            formula, kind = await self._persist(Relation.FORMULAS, formula, formula_to_remote)
            _replace(self._formulas, old_id, formula)
            if kind is WriteKind.CREATION:
                await self._repoint_formula(old_id, formula.id)
        logger.info("formula_saved", formula_id=formula.id, write_kind=kind.value)
        return SaveResult(entity=formula, write_kind=kind)

    async def _repoint_formula(self, old_id: str, new_id: str) -> None:
        for i, product in enumerate(self._products):
            if product.formula_id == old_id:
                self._products[i] = product.model_copy(update={"formula_id": new_id})
                await self._push_repointed(Relation.FINISHED_PRODUCTS, self._products[i], product_to_remote)

    async def delete_formula(self, formula_id: str) -> None:
        async with self._lock:
            formula = self.get_formula(formula_id)
            await self._remove(Relation.FORMULAS, formula)
            self._formulas.remove(formula)
        logger.info("formula_deleted", formula_id=formula_id)

    async def save_product(self, product: FinishedProduct) -> SaveResult[FinishedProduct]:
        async with self._lock:
            _upsert(self._products, product)
            old_id = product.id
            product, kind = await self._persist(Relation.FINISHED_PRODUCTS, product, product_to_remote)
            _replace(self._products, old_id, product)
        logger.info("product_saved", product_id=product.id, write_kind=kind.value)
        return SaveResult(entity=product, write_kind=kind)

    async def delete_product(self, product_id: str) -> None:
        async with self._lock:
            product = self.get_product(product_id)
            await self._remove(Relation.FINISHED_PRODUCTS, product)
            self._products.remove(product)
        logger.info("product_deleted", product_id=product_id)

    # Notes and wishlist

    async def save_note(self, note: ScentNote) -> SaveResult[ScentNote]:
        """Save a note. New notes go to the front of the collection."""
        async with self._lock:
            _upsert(self._notes, note, prepend=True)
            old_id = note.id
            note, kind = await self._persist(Relation.NOTES, note, note_to_remote)
            _replace(self._notes, old_id, note)
        logger.info("note_saved", note_id=note.id, material_id=note.material_id, write_kind=kind.value)
        return SaveResult(entity=note, write_kind=kind)

    async def delete_note(self, note_id: str) -> None:
        async with self._lock:
            index = _index_of(self._notes, note_id)
            if index is None:
                raise EntityNotFoundError("note", note_id)
            await self._remove(Relation.NOTES, self._notes[index])
            self._notes.pop(index)
        logger.info("note_deleted", note_id=note_id)

    def notes_for(self, material_id: str) -> list[ScentNote]:
        return [note for note in self._notes if note.material_id == material_id]

    async def add_wishlist_item(self, name: str, note: str = "") -> WishlistItem | None:
        """Add a wishlist entry at the front. Blank names are ignored and return None."""
        if not name.strip():
            logger.debug("wishlist_blank_name_ignored")
            return None
        item = WishlistItem(name=name, note=note)
        async with self._lock:
            self._wishlist.insert(0, item)
            old_id = item.id
            item, _ = await self._persist(Relation.WISHLIST_ITEMS, item, wishlist_to_remote)
            _replace(self._wishlist, old_id, item)
        logger.info("wishlist_item_added", item_id=item.id)
        return item

    async def remove_wishlist_item(self, item_id: str) -> None:
        async with self._lock:
            index = _index_of(self._wishlist, item_id)
            if index is None:
                raise EntityNotFoundError("wishlist item", item_id)
            await self._remove(Relation.WISHLIST_ITEMS, self._wishlist[index])
            self._wishlist.pop(index)
        logger.info("wishlist_item_removed", item_id=item_id)

    # Family profiles

    async def update_family_profile(self, family: OlfactiveFamily, profile: FamilyProfile) -> FamilyProfiles:
        """Replace one family's profile and persist it as an override."""
        async with self._lock:
            self._family_profiles = self._family_profiles.with_override(family, profile)
            row = family_profile_to_remote(family, profile)
            try:
                existing = await self._store.find_first(Relation.FAMILY_PROFILES, "family", family.value)
                if existing is None:
                    await self._store.insert(Relation.FAMILY_PROFILES, row)
                else:
                    await self._store.update(Relation.FAMILY_PROFILES, str(existing["id"]), row)
            except StorageError as e:
                logger.warning("family_profile_write_failed", family=family.value, error=e.message)
                raise RemoteWriteError(Relation.FAMILY_PROFILES.value, family.value, e.message) from e
        logger.info("family_profile_updated", family=family.value)
        return self._family_profiles

    # Bulk operations

    async def seed_core_catalog(self, candidates: list[Material] | None = None) -> SeedReport:
        """Seed the remote store, then reload every collection from it."""
        report = await self._seed_engine.seed(candidates if candidates is not None else core_catalog())
        await self.load()
        return report

    def restore_templates(self) -> RestoredTemplates:
        """
        Re-add built-in materials and sample work missing from memory.

        Materials match on natural key; formulas, products and wishlist
        items on name; notes on material and text. Template references
        resolve to the materials and formulas held after the restore.
        Added entities are Pending and reach the store on their next save.
        """
        present = {m.natural_key for m in self._materials}
        materials = [m for m in core_catalog() if m.natural_key not in present]
        self._materials.extend(materials)

        built = templates(self._materials, self._formulas)

        formula_names = {f.name for f in self._formulas}
        formulas = [f for f in built.formulas if f.name not in formula_names]
        self._formulas.extend(formulas)

        product_names = {p.name for p in self._products}
        products = [p for p in built.finished_products if p.name not in product_names]
        self._products.extend(products)

        note_keys = {(n.material_id, n.text) for n in self._notes}
        notes = [n for n in built.notes if (n.material_id, n.text) not in note_keys]
        self._notes.extend(notes)

        wishlist_names = {w.name for w in self._wishlist}
        wishlist = [w for w in built.wishlist if w.name not in wishlist_names]
        self._wishlist.extend(wishlist)

        restored = RestoredTemplates(
            materials=materials,
            formulas=formulas,
            finished_products=products,
            notes=notes,
            wishlist=wishlist,
        )
        logger.info(
            "templates_restored",
            materials=len(materials),
            formulas=len(formulas),
            finished_products=len(products),
            notes=len(notes),
            wishlist=len(wishlist),
        )
        return restored

    def clear_all(self) -> None:
        """Empty every in-memory collection. Family profiles and the remote store are untouched."""
        self._materials = []
        self._formulas = []
        self._products = []
        self._notes = []
        self._wishlist = []
        logger.info("domain_cleared")

    # Snapshots

    def export_snapshot(self) -> SnapshotDocument:
        return self._codec.export(
            materials=self._materials,
            formulas=self._formulas,
            finished_products=self._products,
            notes=self._notes,
            wishlist=self._wishlist,
            family_profiles=self._family_profiles,
        )

    def export_snapshot_json(self) -> str:
        return self._codec.encode(self.export_snapshot())

    def import_snapshot(self, raw: str | bytes | dict[str, Any]) -> SnapshotPatch:
        """
        Replace the collections present in the document.

        Raises:
            SnapshotParseError: If the document is invalid. Nothing is applied.
        """
        patch = self._codec.decode(raw)
        if patch.materials is not None:
            self._materials = list(patch.materials)
        if patch.formulas is not None:
            self._formulas = list(patch.formulas)
        if patch.finished_products is not None:
            self._products = list(patch.finished_products)
        if patch.notes is not None:
            self._notes = list(patch.notes)
        if patch.wishlist is not None:
            self._wishlist = list(patch.wishlist)
        profiles = patch.profiles()
        if profiles is not None:
            self._family_profiles = profiles

        logger.info("snapshot_imported", fields=patch.present_fields())
        return patch

    # Derived views

    def material_views(self) -> list[MaterialView]:
        return aggregates.material_views(self._materials)

    def material_view(self, material_id: str) -> MaterialView:
        return aggregates.material_view(self.get_material(material_id))

    def dashboard_stats(self) -> DashboardStats:
        return aggregates.dashboard_stats(self._materials, self._formulas)

    def activity_feed(self, limit: int | None = None) -> list[ActivityEvent]:
        return aggregates.activity_feed(self._materials, self._formulas, self._notes, limit=limit)

    def recent_activity(self) -> list[ActivityEvent]:
        return self.activity_feed(limit=self._recent_activity_limit)

    def family_distribution(self, formula_id: str) -> list[FamilyShare]:
        return aggregates.family_distribution(self.get_formula(formula_id), self._materials)

    def top_families(self, formula_id: str) -> list[FamilyShare]:
        return aggregates.top_families(
            self.get_formula(formula_id), self._materials, limit=self._top_families_limit
        )

    def recent_formulas(self) -> list[Formula]:
        return aggregates.recent_formulas(self._formulas, limit=self._recent_formulas_limit)
