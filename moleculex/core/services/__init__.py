"""Core domain services."""

from moleculex.core.services import aggregates, schema_mapper
from moleculex.core.services.batch_reconciler import (
    BatchFailure,
    BatchReconciler,
    ReconcileResult,
)
from moleculex.core.services.identity_router import WriteKind, adopt_identity, classify
from moleculex.core.services.seed_catalog import Templates, core_catalog, templates
from moleculex.core.services.seed_engine import SeedEngine, SeedReport
from moleculex.core.services.snapshot_codec import (
    SNAPSHOT_VERSION,
    SnapshotCodec,
    SnapshotDocument,
    SnapshotPatch,
)

__all__ = [
    "aggregates",
    "schema_mapper",
    "BatchReconciler",
    "BatchFailure",
    "ReconcileResult",
    "WriteKind",
    "classify",
    "adopt_identity",
    "SeedEngine",
    "SeedReport",
    "core_catalog",
    "templates",
    "Templates",
    "SnapshotCodec",
    "SnapshotDocument",
    "SnapshotPatch",
    "SNAPSHOT_VERSION",
]
