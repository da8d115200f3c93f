"""
Service factory functions for dependency injection.

Wires the configured remote store into the domain store. The API layer
and the CLI obtain their instances from here.
"""

from typing import TYPE_CHECKING

from moleculex.config import get_logger, get_settings
from moleculex.core.exceptions import ConfigurationError
from moleculex.core.services import BatchReconciler, SeedEngine, SnapshotCodec

if TYPE_CHECKING:
    from moleculex.application.domain_store import DomainStore
    from moleculex.core.interfaces import IRemoteStore

logger = get_logger(__name__)

# Singleton instances
_remote_store: "IRemoteStore | None" = None
_domain_store: "DomainStore | None" = None


def get_remote_store() -> "IRemoteStore":
    """Get or create the remote store selected by REMOTE_BACKEND."""
    global _remote_store
    if _remote_store is not None:
        return _remote_store

    settings = get_settings()
    backend = settings.remote.backend

    # Lazy import infrastructure to avoid circular imports
    if backend == "sqlite":
        from moleculex.infrastructure.storage.sqlite import SQLiteRemoteStore

        _remote_store = SQLiteRemoteStore()
    elif backend == "rest":
        from moleculex.infrastructure.remote import RestRemoteStore

        if not settings.remote.api_key:
            raise ConfigurationError("REMOTE_API_KEY is required for the rest backend")
        _remote_store = RestRemoteStore()
    else:
        raise ConfigurationError(f"Unknown remote backend: {backend}")

    logger.info("remote_store_created", backend=backend)
    return _remote_store


def get_domain_store(store: "IRemoteStore | None" = None) -> "DomainStore":
    """
    Get or create the DomainStore singleton.

    Args:
        store: Optional remote store override. Passing one builds a fresh
            instance and replaces the singleton.
    """
    global _domain_store

    if _domain_store is not None and store is None:
        return _domain_store

    from moleculex.application.domain_store import DomainStore

    settings = get_settings()
    remote = store or get_remote_store()
    reconciler = BatchReconciler(remote)

    _domain_store = DomainStore(
        remote,
        reconciler=reconciler,
        seed_engine=SeedEngine(remote, reconciler, concurrency=settings.seed.concurrency),
        codec=SnapshotCodec(version=settings.snapshot.format_version),
        recent_activity_limit=settings.dashboard.recent_activity,
        top_families_limit=settings.dashboard.top_families,
        recent_formulas_limit=settings.dashboard.recent_formulas,
    )
    return _domain_store


def reset_services() -> None:
    """Drop singleton instances (for testing)."""
    global _remote_store, _domain_store
    _remote_store = None
    _domain_store = None
