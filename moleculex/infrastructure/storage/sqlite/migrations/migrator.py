"""
Versioned schema migrations for the SQLite store.

Migration files are named vNNN_description.sql and applied in version
order. Each file runs in one transaction together with its row in
schema_migrations, so a failed file leaves no partial schema behind.
An applied file whose content has since changed stops the run: the
store adapter maps entity fields onto these exact columns.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from moleculex.config import get_logger, get_settings
from moleculex.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
_FILENAME = re.compile(r"v(\d+)_(\w+)\.sql")

# Tables the remote store adapter reads and writes
REQUIRED_TABLES = (
    "materials",
    "inventory_batches",
    "notes",
    "wishlist_items",
    "formulas",
    "finished_products",
    "family_profiles",
    "schema_migrations",
)


@dataclass(frozen=True)
class MigrationInfo:
    """One migration file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)

    def script(self) -> str:
        """The file wrapped in a transaction that also records it."""
        body = self.path.read_text(encoding="utf-8")
        return (
            "BEGIN IMMEDIATE;\n"
            f"{body}\n;\n"
            "INSERT INTO schema_migrations (version, name, checksum) "
            f"VALUES ('{self.version}', '{self.name}', '{self.checksum}');\n"
            "COMMIT;"
        )


@dataclass
class MigrationResult:
    """A migration that ran."""

    version: str
    name: str
    execution_time_ms: int


@dataclass
class MigrationStatus:
    """Where a database file stands against the shipped migrations."""

    exists: bool
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    missing_tables: list[str] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return self.exists and not self.pending and not self.missing_tables


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in version order; misnamed files are skipped."""
    migrations = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(migrations, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum they were applied with."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _existing_tables(conn: aiosqlite.Connection) -> set[str]:
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    return {row[0] for row in await cursor.fetchall()}


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """
    Run one migration file atomically.

    Raises:
        DatabaseError: If any statement fails. Nothing from the file is kept.
    """
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()

    try:
        await conn.executescript(migration.script())
    except aiosqlite.Error as e:
        if conn.in_transaction:
            await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        raise DatabaseError(f"migration v{migration.version}_{migration.name}", str(e)) from e

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    await conn.execute(
        "UPDATE schema_migrations SET execution_time_ms = ? WHERE version = ?",
        (elapsed_ms, migration.version),
    )
    await conn.commit()

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed_ms)
    return MigrationResult(version=migration.version, name=migration.name, execution_time_ms=elapsed_ms)


def create_backup(db_path: Path) -> Path:
    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{timestamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def _migrate(db_path: Path) -> list[MigrationResult]:
    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await get_applied_migrations(conn)
        for migration in discover_migrations():
            recorded = applied.get(migration.version)
            if recorded is None:
                results.append(await apply_migration(conn, migration))
            elif recorded != migration.checksum:
                raise DatabaseError(
                    f"migration v{migration.version}_{migration.name}",
                    "file changed after it was applied",
                )

        missing = [t for t in REQUIRED_TABLES if t not in await _existing_tables(conn)]
        if missing:
            raise DatabaseError("verify schema", f"missing tables: {', '.join(missing)}")
    return results


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema.

    An existing file is copied aside first and restored if the run fails.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Whether to back up an existing database first

    Returns:
        The migrations that ran, in order

    Raises:
        DatabaseError: On a failed migration, a changed migration file, or
            a schema missing required tables.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None

    try:
        results = await _migrate(db_path)
    except (aiosqlite.Error, DatabaseError) as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        backup_path.unlink()
    logger.info("database_ready", applied=[r.version for r in results])
    return results


# Alias used by the API lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    db_path = db_path or get_settings().storage.db_path
    if not db_path.exists():
        return MigrationStatus(exists=False, pending=[m.version for m in discover_migrations()])

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        existing = await _existing_tables(conn)

    return MigrationStatus(
        exists=True,
        applied=sorted(applied, key=int),
        pending=[m.version for m in discover_migrations() if m.version not in applied],
        missing_tables=[t for t in REQUIRED_TABLES if t not in existing],
    )
