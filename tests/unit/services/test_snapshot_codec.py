"""Tests for snapshot export and import."""

import json

import pytest

from moleculex.core.entities import (
    FamilyProfile,
    FamilyProfiles,
    Formula,
    Material,
    OlfactiveFamily,
    Persisted,
    WishlistItem,
)
from moleculex.core.exceptions import SnapshotParseError
from moleculex.core.services.snapshot_codec import SNAPSHOT_VERSION, SnapshotCodec


@pytest.fixture
def codec() -> SnapshotCodec:
    return SnapshotCodec()


def _export(codec: SnapshotCodec, **overrides):
    collections = {
        "materials": [],
        "formulas": [],
        "finished_products": [],
        "notes": [],
        "wishlist": [],
        "family_profiles": FamilyProfiles.defaults(),
    }
    collections.update(overrides)
    return codec.export(**collections)


class TestExport:
    def test_document_shape(self, codec):
        document = json.loads(codec.encode(_export(codec, materials=[Material(name="Ambrox")])))

        assert document["version"] == SNAPSHOT_VERSION
        assert "date" in document
        assert document["materials"][0]["name"] == "Ambrox"
        assert document["materials"][0]["id"].startswith("user-")
        assert set(document["family_profiles"]) == {f.value for f in OlfactiveFamily}

    def test_round_trip(self, codec, sample_material):
        persisted = sample_material.model_copy(update={"identity": Persisted(remote_id="r-1")})
        formula = Formula(name="Study")

        patch = codec.decode(codec.encode(_export(codec, materials=[persisted], formulas=[formula])))

        assert patch.materials == [persisted]
        assert patch.formulas == [formula]
        assert patch.materials[0].is_persisted
        assert not patch.formulas[0].is_persisted


class TestDecode:
    def test_absent_fields_stay_none(self, codec):
        patch = codec.decode('{"wishlist": [{"name": "Ambrox"}]}')

        assert patch.present_fields() == ["wishlist"]
        assert patch.materials is None
        assert patch.wishlist[0] == WishlistItem.model_validate(patch.wishlist[0].model_dump())

    def test_null_counts_as_absent(self, codec):
        patch = codec.decode({"materials": None, "notes": []})
        assert patch.present_fields() == ["notes"]

    def test_accepts_bytes(self, codec):
        assert codec.decode(b'{"formulas": []}').formulas == []

    def test_invalid_json(self, codec):
        with pytest.raises(SnapshotParseError):
            codec.decode("{not json")

    def test_non_object(self, codec):
        with pytest.raises(SnapshotParseError):
            codec.decode("[1, 2]")

    def test_invalid_field_reports_location(self, codec):
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode({"materials": [{"olfactive_family": "Citrus"}]})
        assert exc_info.value.details["field"].startswith("materials")

    def test_newer_version_rejected(self, codec):
        with pytest.raises(SnapshotParseError):
            codec.decode({"version": SNAPSHOT_VERSION + 1})

    def test_repeated_material_id_rejected(self, codec):
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode({"materials": [{"id": "abc", "name": "A"}, {"id": "abc", "name": "B"}]})
        assert exc_info.value.details["field"] == "materials"

    def test_repeated_wishlist_id_rejected(self, codec):
        with pytest.raises(SnapshotParseError):
            codec.decode({"wishlist": [{"id": "w1", "name": "Ambrox"}, {"id": "w1", "name": "Orris"}]})

    def test_repeated_batch_id_rejected(self, codec):
        batches = [{"id": "b1", "stock_amount": 1}, {"id": "b1", "stock_amount": 2}]
        with pytest.raises(SnapshotParseError) as exc_info:
            codec.decode({"materials": [{"id": "m1", "name": "A", "inventory_batches": batches}]})
        assert exc_info.value.details["field"] == "materials.inventory_batches"

    def test_profiles_overlay_defaults(self, codec):
        patch = codec.decode({"family_profiles": {"Citrus": {"main_character": "Zesty", "description": ""}}})

        profiles = patch.profiles()

        assert profiles.get(OlfactiveFamily.CITRUS) == FamilyProfile(main_character="Zesty", description="")
        assert profiles.get(OlfactiveFamily.WOODY) == FamilyProfiles.defaults().get(OlfactiveFamily.WOODY)
