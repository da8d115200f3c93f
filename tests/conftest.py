"""Pytest configuration and fixtures."""

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

import moleculex.infrastructure.storage.sqlite.connection as conn_module
from moleculex.application.domain_store import DomainStore
from moleculex.core.entities import (
    Formula,
    FormulaIngredient,
    InventoryBatch,
    Material,
    MaterialOrigin,
    NoteRole,
    OlfactiveFamily,
)
from moleculex.core.exceptions import DatabaseError, RemoteReadError
from moleculex.core.interfaces import IRemoteStore, Relation, Row
from moleculex.infrastructure.storage.sqlite import SQLiteRemoteStore, close_pool
from moleculex.infrastructure.storage.sqlite.migrations.migrator import initialize_database


class FakeRemoteStore(IRemoteStore):
    """
    In-memory relational store.

    Tests register failures with fail_on(); a matching call raises the
    error the real adapters raise.
    """

    def __init__(self) -> None:
        self.tables: dict[Relation, list[Row]] = {relation: [] for relation in Relation}
        self.calls: list[tuple[str, Relation]] = []
        self._failures: list[tuple[str, Relation, Any]] = []
        self._clock = 0

    def fail_on(self, operation: str, relation: Relation, when: Any = None) -> None:
        """Fail the next matching call. `when` filters on the row (a predicate) or row id."""
        self._failures.append((operation, relation, when))

    def _maybe_fail(self, operation: str, relation: Relation, row: Row | None, row_id: str | None) -> None:
        for i, (op, rel, when) in enumerate(self._failures):
            if op != operation or rel != relation:
                continue
            if callable(when) and not when(row or {}):
                continue
            if isinstance(when, str) and when != row_id:
                continue
            del self._failures[i]
            if operation in ("select", "find_first"):
                raise RemoteReadError(relation.value, "injected failure")
            raise DatabaseError(f"{operation} {relation.value}", "injected failure")

    def _now(self) -> str:
        # Strictly increasing so ordering by created_at is deterministic
        self._clock += 1
        return (datetime(2024, 1, 1, tzinfo=UTC) + timedelta(seconds=self._clock)).isoformat()

    async def insert(self, relation: Relation, row: Row) -> Row:
        self.calls.append(("insert", relation))
        self._maybe_fail("insert", relation, row, None)
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", self._now())
        self.tables[relation].append(stored)
        return dict(stored)

    async def update(self, relation: Relation, row_id: str, row: Row) -> Row:
        self.calls.append(("update", relation))
        self._maybe_fail("update", relation, row, row_id)
        for stored in self.tables[relation]:
            if stored["id"] == row_id:
                stored.update({k: v for k, v in row.items() if k not in ("id", "created_at")})
                return dict(stored)
        raise DatabaseError(f"update {relation.value}", f"no row with id {row_id}")

    async def delete(self, relation: Relation, row_id: str) -> None:
        self.calls.append(("delete", relation))
        self._maybe_fail("delete", relation, None, row_id)
        self.tables[relation] = [r for r in self.tables[relation] if r["id"] != row_id]

    async def select(self, relation: Relation, filters: Row | None = None) -> list[Row]:
        self.calls.append(("select", relation))
        self._maybe_fail("select", relation, None, None)
        filters = filters or {}
        return [
            dict(r)
            for r in self.tables[relation]
            if all(r.get(k) == v for k, v in filters.items())
        ]

    async def find_first(self, relation: Relation, column: str, value: Any) -> Row | None:
        self.calls.append(("find_first", relation))
        self._maybe_fail("find_first", relation, None, None)
        for r in self.tables[relation]:
            if r.get(column) == value:
                return dict(r)
        return None


@pytest.fixture
def fake_store() -> FakeRemoteStore:
    """Empty in-memory remote store."""
    return FakeRemoteStore()


@pytest.fixture
def domain_store(fake_store: FakeRemoteStore) -> DomainStore:
    """Domain store wired to the in-memory remote store."""
    return DomainStore(fake_store)


@pytest.fixture
def sample_batch() -> InventoryBatch:
    return InventoryBatch(
        batch_number="B-001",
        lab="Givaudan",
        supplier="Perfumer Supply House",
        purchase_date=date(2024, 3, 1),
        stock_amount=10.0,
        cost_per_gram=0.5,
    )


@pytest.fixture
def sample_material(sample_batch: InventoryBatch) -> Material:
    """A pending material with one pending batch."""
    return Material(
        name="Bergamot Oil",
        olfactive_family=OlfactiveFamily.CITRUS,
        origin=MaterialOrigin.ESSENTIAL_OIL,
        note_roles=[NoteRole.TOP],
        cas_number="8007-75-8",
        odor_strength=6,
        impact=4,
        scent_dna={"citrus": 9, "floral": 3},
        evaporation_curve=[100, 40, 5],
        synergies=["Lavender"],
        ifra_max_concentration=0.4,
        inventory_batches=[sample_batch],
    )


@pytest.fixture
def sample_formula() -> Formula:
    return Formula(
        name="Summer Cologne",
        ingredients=[FormulaIngredient(material_id="m-1", amount=7.0)],
    )


# SQLite fixtures


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    mock.storage.acquire_timeout = 5.0
    return mock


@pytest.fixture
async def migrated_db(temp_db_path: Path, mock_settings) -> Path:
    """Temporary database with the full schema applied."""
    with patch(
        "moleculex.infrastructure.storage.sqlite.migrations.migrator.get_settings",
        return_value=mock_settings,
    ):
        await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
async def sqlite_store(migrated_db: Path, mock_settings) -> AsyncGenerator[SQLiteRemoteStore, None]:
    """SQLiteRemoteStore bound to the temporary database through the global pool."""
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield SQLiteRemoteStore()
        finally:
            await close_pool()
