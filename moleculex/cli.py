"""
MoleculeX management CLI.

Usage:
    moleculex migrate              Apply pending schema migrations (sqlite backend)
    moleculex status               Show schema migration status
    moleculex seed                 Seed the built-in material catalog
    moleculex export [-o FILE]     Write a backup of the remote store
    moleculex check-backup FILE    Validate a backup file without applying it
    moleculex serve                Start the API server
"""

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from moleculex.application.domain_store import DomainStore
from moleculex.application.services import get_domain_store, get_remote_store
from moleculex.config import configure_logging, get_settings
from moleculex.core.exceptions import MoleculeXError, SnapshotError
from moleculex.core.services import SnapshotCodec
from moleculex.core.services.snapshot_codec import BACKUP_FILENAME

T = TypeVar("T")


async def _with_store(action: Callable[[DomainStore], Awaitable[T]]) -> T:
    """Prepare the configured backend, load the store, run action, release connections."""
    sqlite = get_settings().remote.backend == "sqlite"
    if sqlite:
        from moleculex.infrastructure.storage.sqlite.migrations import run_migrations

        await run_migrations()

    try:
        store = get_domain_store()
        await store.load()
        return await action(store)
    finally:
        await get_remote_store().close()
        if sqlite:
            from moleculex.infrastructure.storage.sqlite import close_pool

            await close_pool()


def _require_sqlite(command: str) -> None:
    backend = get_settings().remote.backend
    if backend != "sqlite":
        print(f"'{command}' manages the local database; REMOTE_BACKEND is '{backend}'.")
        sys.exit(1)


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from moleculex.infrastructure.storage.sqlite.migrations import run_migrations

    _require_sqlite("migrate")
    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    if not results:
        print("Schema is up to date.")
    for result in results:
        print(f"Applied v{result.version}_{result.name} ({result.execution_time_ms} ms)")


def cmd_status(args: argparse.Namespace) -> None:
    """Show migration status."""
    from moleculex.infrastructure.storage.sqlite.migrations import get_migration_status

    _require_sqlite("status")
    status = asyncio.run(get_migration_status())
    print(f"Database: {get_settings().storage.db_path}")
    if not status.exists:
        print("  not created yet")
    print(f"  applied: {', '.join(status.applied) or '-'}")
    print(f"  pending: {', '.join(status.pending) or '-'}")
    if status.missing_tables:
        print(f"  missing tables: {', '.join(status.missing_tables)}")
    if not status.up_to_date:
        sys.exit(1)


def cmd_seed(args: argparse.Namespace) -> None:
    """Seed the built-in catalog."""
    report = asyncio.run(_with_store(lambda store: store.seed_core_catalog()))
    print(
        f"Seeded {report.succeeded}, skipped {report.skipped}, failed {report.failed}, "
        f"batch failures {report.batch_failures}."
    )
    if report.failed:
        sys.exit(1)


def cmd_export(args: argparse.Namespace) -> None:
    """Write a backup file."""

    async def export(store: DomainStore) -> str:
        return store.export_snapshot_json()

    output = Path(args.output)
    output.write_text(asyncio.run(_with_store(export)), encoding="utf-8")
    print(f"Backup written to {output}")


def cmd_check_backup(args: argparse.Namespace) -> None:
    """Validate a backup file."""
    path = Path(args.file)
    try:
        patch = SnapshotCodec(version=get_settings().snapshot.format_version).decode(path.read_bytes())
    except SnapshotError as e:
        print(f"Invalid backup: {e.message}")
        sys.exit(1)

    print(f"Backup version {patch.version}")
    for name in patch.present_fields():
        value = getattr(patch, name)
        print(f"  {name}: {len(value)}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "moleculex.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="moleculex",
        description="MoleculeX management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_migrate = sub.add_parser("migrate", help="Apply pending schema migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration copy")
    p_migrate.set_defaults(func=cmd_migrate)

    p_status = sub.add_parser("status", help="Show schema migration status")
    p_status.set_defaults(func=cmd_status)

    p_seed = sub.add_parser("seed", help="Seed the built-in material catalog")
    p_seed.set_defaults(func=cmd_seed)

    p_export = sub.add_parser("export", help="Write a backup of the remote store")
    p_export.add_argument("-o", "--output", default=BACKUP_FILENAME, help=f"Output file (default: {BACKUP_FILENAME})")
    p_export.set_defaults(func=cmd_export)

    p_check = sub.add_parser("check-backup", help="Validate a backup file")
    p_check.add_argument("file", help="Backup JSON file")
    p_check.set_defaults(func=cmd_check_backup)

    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=settings.api.host, help=f"Bind host (default: {settings.api.host})")
    p_serve.add_argument("--port", type=int, default=settings.api.port, help=f"Bind port (default: {settings.api.port})")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging()
    try:
        args.func(args)
    except MoleculeXError as e:
        print(f"Error [{e.code}]: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
