"""
SQLite implementation of the remote relational store.

Rows are plain dicts keyed by external column names. Columns holding
lists or maps are stored as JSON text and decoded on the way out.
"""

import json
import uuid
from datetime import UTC, datetime
from typing import Any

import aiosqlite

from moleculex.config import get_logger
from moleculex.core.exceptions import DatabaseError, RemoteReadError
from moleculex.core.interfaces import IRemoteStore, Relation, Row
from moleculex.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

JSON_COLUMNS: dict[Relation, frozenset[str]] = {
    Relation.MATERIALS: frozenset(
        {"roles", "functional_roles", "scent_profile", "evaporation_curve", "synergies"}
    ),
    Relation.FORMULAS: frozenset({"ingredients", "evaluations"}),
    Relation.FINISHED_PRODUCTS: frozenset({"packaging", "custom_packaging", "custom_costs"}),
}


def _generate_id() -> str:
    """Generate a new UUID text ID."""
    return str(uuid.uuid4())


class SQLiteRemoteStore(IRemoteStore):
    """Relational store backed by the local SQLite database."""

    def __init__(self) -> None:
        self._columns: dict[Relation, frozenset[str]] = {}

    async def _table_columns(self, conn: aiosqlite.Connection, relation: Relation) -> frozenset[str]:
        if relation not in self._columns:
            cursor = await conn.execute(f"PRAGMA table_info({relation.value})")
            rows = await cursor.fetchall()
            self._columns[relation] = frozenset(row["name"] for row in rows)
        return self._columns[relation]

    async def _check_columns(
        self, conn: aiosqlite.Connection, relation: Relation, names: list[str]
    ) -> None:
        known = await self._table_columns(conn, relation)
        unknown = [name for name in names if name not in known]
        if unknown:
            raise DatabaseError(relation.value, f"unknown columns: {', '.join(unknown)}")

    def _encode(self, relation: Relation, row: Row) -> Row:
        json_columns = JSON_COLUMNS.get(relation, frozenset())
        return {
            key: json.dumps(value) if key in json_columns and value is not None else value
            for key, value in row.items()
        }

    def _decode(self, relation: Relation, row: Row) -> Row:
        json_columns = JSON_COLUMNS.get(relation, frozenset())
        data = dict(row)
        for key in json_columns & data.keys():
            if isinstance(data[key], str):
                try:
                    data[key] = json.loads(data[key])
                except ValueError:
                    logger.warning("json_column_unreadable", relation=relation.value, column=key)
                    data[key] = None
        return data

    async def _fetch_by_id(self, conn: aiosqlite.Connection, relation: Relation, row_id: str) -> Row:
        cursor = await conn.execute(f"SELECT * FROM {relation.value} WHERE id = ?", (row_id,))
        row = await cursor.fetchone()
        if row is None:
            raise DatabaseError(relation.value, f"no row with id {row_id}")
        return self._decode(relation, row)

    async def insert(self, relation: Relation, row: Row) -> Row:
        data = self._encode(relation, row)
        if not data.get("id"):
            data["id"] = _generate_id()
        if not data.get("created_at"):
            data["created_at"] = datetime.now(UTC).isoformat()

        columns = list(data.keys())
        try:
            async with get_transaction() as conn:
                await self._check_columns(conn, relation, columns)
                await conn.execute(
                    f"INSERT INTO {relation.value} ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    tuple(data[c] for c in columns),
                )
                stored = await self._fetch_by_id(conn, relation, data["id"])
        except aiosqlite.Error as e:
            raise DatabaseError(f"insert into {relation.value}", str(e)) from e

        logger.debug("row_inserted", relation=relation.value, row_id=stored["id"])
        return stored

    async def update(self, relation: Relation, row_id: str, row: Row) -> Row:
        data = self._encode(relation, row)
        # Identity and creation time are owned by the store
        data.pop("id", None)
        data.pop("created_at", None)
        columns = list(data.keys())

        try:
            async with get_transaction() as conn:
                await self._check_columns(conn, relation, columns)
                if columns:
                    cursor = await conn.execute(
                        f"UPDATE {relation.value} SET {', '.join(f'{c} = ?' for c in columns)} "
                        "WHERE id = ?",
                        (*(data[c] for c in columns), row_id),
                    )
                    if cursor.rowcount == 0:
                        raise DatabaseError(f"update {relation.value}", f"no row with id {row_id}")
                stored = await self._fetch_by_id(conn, relation, row_id)
        except aiosqlite.Error as e:
            raise DatabaseError(f"update {relation.value}", str(e)) from e

        logger.debug("row_updated", relation=relation.value, row_id=row_id)
        return stored

    async def delete(self, relation: Relation, row_id: str) -> None:
        try:
            async with get_transaction() as conn:
                await conn.execute(f"DELETE FROM {relation.value} WHERE id = ?", (row_id,))
        except aiosqlite.Error as e:
            raise DatabaseError(f"delete from {relation.value}", str(e)) from e
        logger.debug("row_deleted", relation=relation.value, row_id=row_id)

    async def select(self, relation: Relation, filters: Row | None = None) -> list[Row]:
        filters = filters or {}
        try:
            async with get_connection() as conn:
                await self._check_columns(conn, relation, list(filters.keys()))
                where = " AND ".join(f"{c} = ?" for c in filters)
                sql = f"SELECT * FROM {relation.value}"
                if where:
                    sql += f" WHERE {where}"
                cursor = await conn.execute(sql + " ORDER BY rowid", tuple(filters.values()))
                rows = await cursor.fetchall()
        except (aiosqlite.Error, DatabaseError) as e:
            raise RemoteReadError(relation.value, str(e)) from e
        return [self._decode(relation, row) for row in rows]

    async def find_first(self, relation: Relation, column: str, value: Any) -> Row | None:
        try:
            async with get_connection() as conn:
                await self._check_columns(conn, relation, [column])
                cursor = await conn.execute(
                    f"SELECT * FROM {relation.value} WHERE {column} = ? ORDER BY rowid LIMIT 1",
                    (value,),
                )
                row = await cursor.fetchone()
        except (aiosqlite.Error, DatabaseError) as e:
            raise RemoteReadError(relation.value, str(e)) from e
        return self._decode(relation, row) if row is not None else None
