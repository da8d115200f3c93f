"""SQLite storage implementations."""

from moleculex.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from moleculex.infrastructure.storage.sqlite.remote_store import SQLiteRemoteStore

__all__ = [
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "SQLiteRemoteStore",
]
