"""Tests for create-vs-update routing."""

from datetime import UTC, datetime

from moleculex.core.entities import Material, Persisted, WishlistItem
from moleculex.core.services.identity_router import WriteKind, adopt_identity, classify


class TestClassify:
    def test_pending_is_creation(self):
        assert classify(Material(name="A")) is WriteKind.CREATION

    def test_persisted_is_mutation(self):
        material = Material(name="A", identity=Persisted(remote_id="r1"))
        assert classify(material) is WriteKind.MUTATION


class TestAdoptIdentity:
    def test_adopts_id_and_created_at(self):
        material = Material(name="A")
        adopted = adopt_identity(material, {"id": "r1", "created_at": "2024-06-01T08:00:00Z"})

        assert adopted.identity == Persisted(remote_id="r1")
        assert adopted.created_at == datetime(2024, 6, 1, 8, tzinfo=UTC)
        assert not material.is_persisted

    def test_naive_timestamp_treated_as_utc(self):
        adopted = adopt_identity(Material(name="A"), {"id": "r1", "created_at": "2024-06-01T08:00:00"})
        assert adopted.created_at.tzinfo is not None

    def test_keeps_created_at_when_row_has_none(self):
        material = Material(name="A")
        adopted = adopt_identity(material, {"id": "r1"})
        assert adopted.created_at == material.created_at

    def test_entity_without_timestamp(self):
        adopted = adopt_identity(WishlistItem(name="Ambrox"), {"id": "w1", "created_at": "2024-06-01T08:00:00Z"})
        assert adopted.id == "w1"
