"""
Domain exceptions for the MoleculeX application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class MoleculeXError(Exception):
    """Base exception for all MoleculeX errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Mapping Exceptions
class MappingError(MoleculeXError):
    """Base exception for schema translation defects."""

    pass


class MissingFieldError(MappingError):
    """A row lacks a field the mapper cannot default."""

    def __init__(self, relation: str, field: str):
        super().__init__(
            f"Row from '{relation}' is missing required field '{field}'",
            code="MISSING_FIELD",
            details={"relation": relation, "field": field},
        )


# Storage Exceptions
class StorageError(MoleculeXError):
    """Base exception for remote store operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class RemoteReadError(StorageError):
    """Reading from the remote store failed."""

    def __init__(self, relation: str, reason: str):
        super().__init__(
            f"Failed to read '{relation}': {reason}",
            code="REMOTE_READ_FAILED",
            details={"relation": relation, "reason": reason},
        )


class RemoteWriteError(StorageError):
    """Writing an entity to the remote store failed."""

    def __init__(self, relation: str, entity_id: str, reason: str):
        super().__init__(
            f"Failed to write {relation} '{entity_id}': {reason}",
            code="REMOTE_WRITE_FAILED",
            details={"relation": relation, "entity_id": entity_id, "reason": reason},
        )


class EntityNotFoundError(StorageError):
    """Entity not present in the domain collections."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(
            f"{kind.capitalize()} not found: {entity_id}",
            code="ENTITY_NOT_FOUND",
            details={"kind": kind, "entity_id": entity_id},
        )


# Snapshot Exceptions
class SnapshotError(MoleculeXError):
    """Base exception for backup/restore operations."""

    pass


class SnapshotParseError(SnapshotError):
    """Backup document could not be parsed; nothing was applied."""

    def __init__(self, reason: str, field: str | None = None):
        super().__init__(
            f"Invalid snapshot document: {reason}",
            code="SNAPSHOT_PARSE_ERROR",
            details={"reason": reason, "field": field},
        )


# Validation Exceptions
class ValidationError(MoleculeXError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(MoleculeXError):
    """Configuration error."""

    pass
