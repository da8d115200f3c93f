"""Versioned SQL migrations."""

from moleculex.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    MigrationStatus,
    discover_migrations,
    get_migration_status,
    initialize_database,
    run_migrations,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "MigrationStatus",
    "discover_migrations",
    "get_migration_status",
    "initialize_database",
    "run_migrations",
]
