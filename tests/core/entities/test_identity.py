"""Tests for tagged entity identity."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from moleculex.core.entities import (
    InventoryBatch,
    Material,
    Pending,
    Persisted,
    ScentNote,
    WishlistItem,
    ensure_utc,
)
from moleculex.core.entities.identity import lift_identity


class TestLiftIdentity:
    """Tests for lifting plain identifiers."""

    def test_missing_id_generates_pending(self):
        identity = lift_identity("user", None)
        assert isinstance(identity, Pending)
        assert identity.value.startswith("user-")

    def test_empty_id_generates_pending(self):
        assert isinstance(lift_identity("batch", ""), Pending)

    def test_prefixed_id_is_pending(self):
        identity = lift_identity("user", "user-abc")
        assert identity == Pending(local_id="user-abc")

    def test_other_id_is_persisted(self):
        identity = lift_identity("user", "6f1c2b8e-0000-4000-8000-000000000001")
        assert isinstance(identity, Persisted)
        assert identity.value == "6f1c2b8e-0000-4000-8000-000000000001"

    def test_numeric_id_is_persisted_as_text(self):
        identity = lift_identity("note", 42)
        assert identity == Persisted(remote_id="42")

    def test_generated_ids_are_unique(self):
        assert Pending.new("wish").value != Pending.new("wish").value


class TestIdentifiedModel:
    """Tests for the id handling shared by all entities."""

    def test_new_entity_is_pending(self):
        material = Material(name="Iso E Super")
        assert not material.is_persisted
        assert material.id.startswith("user-")

    def test_prefix_per_entity_type(self):
        assert InventoryBatch().id.startswith("batch-")
        assert ScentNote(material_id="m", text="t").id.startswith("note-")
        assert WishlistItem(name="Ambrox").id.startswith("wish-")

    def test_plain_id_is_lifted(self):
        material = Material.model_validate({"id": "abc-123", "name": "Hedione"})
        assert material.is_persisted
        assert material.id == "abc-123"

    def test_dump_emits_plain_id(self):
        material = Material.model_validate({"id": "abc-123", "name": "Hedione"})
        data = material.model_dump(mode="json")
        assert data["id"] == "abc-123"
        assert "identity" not in data

    def test_dump_and_validate_keep_variant(self):
        pending = Material(name="Galaxolide")
        restored = Material.model_validate(pending.model_dump(mode="json"))
        assert restored.identity == pending.identity
        assert not restored.is_persisted

    def test_explicit_identity_wins(self):
        material = Material(name="Vanillin", identity=Persisted(remote_id="r-1"))
        assert material.id == "r-1"

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            InventoryBatch(stock_amount=-1)


class TestEnsureUtc:
    def test_naive_becomes_utc(self):
        value = ensure_utc(datetime(2024, 5, 1, 12, 0))
        assert value.utcoffset() is not None
        assert value.hour == 12

    def test_naive_created_at_normalised(self):
        material = Material(name="Coumarin", created_at=datetime(2024, 5, 1))
        assert material.created_at.tzinfo is not None
