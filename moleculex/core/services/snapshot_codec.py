"""
Snapshot codec.

Encodes the whole domain state as one self-describing JSON document and
decodes such documents back into a partial patch. Decoding is all or
nothing: any invalid part rejects the entire document.
"""

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from moleculex.config import get_logger
from moleculex.core.entities import (
    FamilyProfile,
    FamilyProfiles,
    FinishedProduct,
    Formula,
    Material,
    OlfactiveFamily,
    ScentNote,
    Timestamp,
    WishlistItem,
)
from moleculex.core.exceptions import SnapshotParseError

logger = get_logger(__name__)

SNAPSHOT_VERSION = 1
BACKUP_FILENAME = "MoleculeX_Backup.json"


def _first_duplicate_id(items: list[Any]) -> str | None:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            return item.id
        seen.add(item.id)
    return None


class SnapshotDocument(BaseModel):
    """A complete export of the domain state."""

    version: int = SNAPSHOT_VERSION
    date: Timestamp = Field(default_factory=lambda: datetime.now(UTC))
    materials: list[Material] = Field(default_factory=list)
    formulas: list[Formula] = Field(default_factory=list)
    finished_products: list[FinishedProduct] = Field(default_factory=list)
    notes: list[ScentNote] = Field(default_factory=list)
    wishlist: list[WishlistItem] = Field(default_factory=list)
    family_profiles: dict[OlfactiveFamily, FamilyProfile] = Field(default_factory=dict)


class SnapshotPatch(BaseModel):
    """
    A decoded import.

    A field left as None was absent from the document and its collection
    must stay untouched.
    """

    version: int = SNAPSHOT_VERSION
    materials: list[Material] | None = None
    formulas: list[Formula] | None = None
    finished_products: list[FinishedProduct] | None = None
    notes: list[ScentNote] | None = None
    wishlist: list[WishlistItem] | None = None
    family_profiles: dict[OlfactiveFamily, FamilyProfile] | None = None

    def present_fields(self) -> list[str]:
        return [
            name
            for name in (
                "materials",
                "formulas",
                "finished_products",
                "notes",
                "wishlist",
                "family_profiles",
            )
            if getattr(self, name) is not None
        ]

    def profiles(self) -> FamilyProfiles | None:
        """Full profile table: defaults overlaid with the imported entries."""
        if self.family_profiles is None:
            return None
        return FamilyProfiles.defaults().with_overrides(self.family_profiles)


class SnapshotCodec:
    """Export and import of snapshot documents."""

    def __init__(self, version: int = SNAPSHOT_VERSION):
        self._version = version

    def export(
        self,
        *,
        materials: list[Material],
        formulas: list[Formula],
        finished_products: list[FinishedProduct],
        notes: list[ScentNote],
        wishlist: list[WishlistItem],
        family_profiles: FamilyProfiles,
    ) -> SnapshotDocument:
        return SnapshotDocument(
            version=self._version,
            materials=list(materials),
            formulas=list(formulas),
            finished_products=list(finished_products),
            notes=list(notes),
            wishlist=list(wishlist),
            family_profiles=dict(family_profiles.profiles),
        )

    def encode(self, document: SnapshotDocument) -> str:
        return document.model_dump_json(indent=2)

    def decode(self, raw: str | bytes | dict[str, Any]) -> SnapshotPatch:
        """
        Parse an import document.

        Raises:
            SnapshotParseError: If the document is not valid JSON, not an
                object, from a newer format version, or any present field
                fails validation.
        """
        if isinstance(raw, (str, bytes)):
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise SnapshotParseError(f"not valid JSON ({e})") from e
        else:
            data = raw

        if not isinstance(data, dict):
            raise SnapshotParseError("document must be a JSON object")

        # Explicit nulls count as absent
        data = {key: value for key, value in data.items() if value is not None}

        try:
            patch = SnapshotPatch.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise SnapshotParseError(first.get("msg", str(e)), field=field) from e

        if patch.version > self._version:
            raise SnapshotParseError(
                f"unsupported version {patch.version} (max {self._version})",
                field="version",
            )

        for name in patch.present_fields():
            if name == "family_profiles":
                continue
            duplicate = _first_duplicate_id(getattr(patch, name))
            if duplicate is not None:
                raise SnapshotParseError(f"duplicate id {duplicate!r}", field=name)
        for material in patch.materials or ():
            duplicate = _first_duplicate_id(material.inventory_batches)
            if duplicate is not None:
                raise SnapshotParseError(
                    f"duplicate batch id {duplicate!r} in material {material.id!r}",
                    field="materials.inventory_batches",
                )

        logger.info("snapshot_decoded", version=patch.version, fields=patch.present_fields())
        return patch
