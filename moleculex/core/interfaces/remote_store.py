"""Abstract interface for the remote relational backing store."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

Row = dict[str, Any]


class Relation(str, Enum):
    """Relations (tables) held by the remote store."""

    MATERIALS = "materials"
    INVENTORY_BATCHES = "inventory_batches"
    NOTES = "notes"
    WISHLIST_ITEMS = "wishlist_items"
    FORMULAS = "formulas"
    FINISHED_PRODUCTS = "finished_products"
    FAMILY_PROFILES = "family_profiles"


class IRemoteStore(ABC):
    """
    Interface for row-level persistence.

    Every call is independently fallible and raises a StorageError
    subclass on failure. There is no multi-call transaction.
    """

    @abstractmethod
    async def insert(self, relation: Relation, row: Row) -> Row:
        """Insert a row and return it with store-assigned fields (id, created_at)."""
        pass

    @abstractmethod
    async def update(self, relation: Relation, row_id: str, row: Row) -> Row:
        """Update the row with the given id and return the stored row."""
        pass

    @abstractmethod
    async def delete(self, relation: Relation, row_id: str) -> None:
        """Delete the row with the given id. Missing rows are not an error."""
        pass

    @abstractmethod
    async def select(self, relation: Relation, filters: Row | None = None) -> list[Row]:
        """Select rows matching all equality filters, in insertion order."""
        pass

    @abstractmethod
    async def find_first(self, relation: Relation, column: str, value: Any) -> Row | None:
        """Return the first row whose column equals value, or None."""
        pass

    async def close(self) -> None:
        """Release client resources. No-op by default."""
        return None
