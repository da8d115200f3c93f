"""Core interfaces (ports) for dependency injection."""

from moleculex.core.interfaces.remote_store import IRemoteStore, Relation, Row

__all__ = [
    "IRemoteStore",
    "Relation",
    "Row",
]
