"""Unit tests for domain exceptions."""

import pytest

from moleculex.core.exceptions import (
    ConfigurationError,
    DatabaseError,
    EntityNotFoundError,
    MappingError,
    MissingFieldError,
    MoleculeXError,
    RemoteReadError,
    RemoteWriteError,
    SnapshotError,
    SnapshotParseError,
    StorageError,
    ValidationError,
)


class TestMoleculeXError:
    """Tests for base MoleculeXError exception."""

    def test_basic_initialization(self):
        error = MoleculeXError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "MoleculeXError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = MoleculeXError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = MoleculeXError("Test error", code="TEST_CODE", details={"extra": "info"})
        assert error.to_dict() == {
            "error": "TEST_CODE",
            "message": "Test error",
            "details": {"extra": "info"},
        }


class TestMappingErrors:
    def test_missing_field(self):
        error = MissingFieldError("materials", "id")
        assert isinstance(error, MappingError)
        assert error.code == "MISSING_FIELD"
        assert error.details["relation"] == "materials"
        assert error.details["field"] == "id"


class TestStorageErrors:
    @pytest.mark.parametrize(
        "error",
        [
            DatabaseError("insert", "disk full"),
            RemoteReadError("materials", "timeout"),
            RemoteWriteError("materials", "user-1", "timeout"),
            EntityNotFoundError("material", "m-1"),
        ],
    )
    def test_are_storage_errors(self, error):
        assert isinstance(error, StorageError)
        assert isinstance(error, MoleculeXError)

    def test_entity_not_found(self):
        error = EntityNotFoundError("formula", "f-9")
        assert error.code == "ENTITY_NOT_FOUND"
        assert "f-9" in error.message

    def test_remote_write_carries_entity(self):
        error = RemoteWriteError("notes", "note-1", "HTTP 500")
        assert error.code == "REMOTE_WRITE_FAILED"
        assert error.details["entity_id"] == "note-1"


class TestSnapshotErrors:
    def test_parse_error(self):
        error = SnapshotParseError("not valid JSON", field="materials.0.name")
        assert isinstance(error, SnapshotError)
        assert error.code == "SNAPSHOT_PARSE_ERROR"
        assert error.details["field"] == "materials.0.name"


class TestOtherErrors:
    def test_validation_error(self):
        error = ValidationError("name", "must not be blank", "")
        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "name"

    def test_configuration_error(self):
        assert ConfigurationError("bad").code == "ConfigurationError"
