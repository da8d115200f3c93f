"""Scent note and wishlist entities."""

from datetime import UTC, datetime
from typing import ClassVar

from pydantic import Field

from moleculex.core.entities.identity import IdentifiedModel, Timestamp


class ScentNote(IdentifiedModel):
    """Free-text impression attached to a material."""

    id_prefix: ClassVar[str] = "note"

    material_id: str  # non-owning back-reference
    text: str
    created_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))


class WishlistItem(IdentifiedModel):
    """A material the user intends to acquire."""

    id_prefix: ClassVar[str] = "wish"

    name: str
    note: str = ""
