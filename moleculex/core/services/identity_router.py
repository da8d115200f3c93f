"""
Identity router.

Decides whether a save is a creation or a mutation, and moves an entity
from its placeholder identity to the one the store assigned.
"""

from datetime import datetime
from enum import Enum
from typing import TypeVar

from moleculex.core.entities import IdentifiedModel, Pending, Persisted, ensure_utc
from moleculex.core.interfaces import Row

T = TypeVar("T", bound=IdentifiedModel)


class WriteKind(str, Enum):
    """Kind of remote write an entity requires."""

    CREATION = "creation"
    MUTATION = "mutation"


def classify(entity: IdentifiedModel) -> WriteKind:
    """Classify by identity variant. Never consults the store."""
    if isinstance(entity.identity, Pending):
        return WriteKind.CREATION
    return WriteKind.MUTATION


def adopt_identity(entity: T, row: Row) -> T:
    """
    Return a copy of entity carrying the store-assigned id and timestamp.

    References held by other entities are not touched.
    """
    update: dict = {"identity": Persisted(remote_id=str(row["id"]))}
    created_at = row.get("created_at")
    if "created_at" in type(entity).model_fields and created_at:
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        update["created_at"] = ensure_utc(created_at)
    return entity.model_copy(update=update)
