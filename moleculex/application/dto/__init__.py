"""Data transfer objects for the HTTP surface."""

from moleculex.application.dto.requests import (
    BatchRequest,
    FamilyProfileRequest,
    FormulaRequest,
    MaterialRequest,
    NoteRequest,
    ProductRequest,
    WishlistRequest,
)
from moleculex.application.dto.responses import (
    BatchFailureResponse,
    DashboardResponse,
    ErrorResponse,
    FamilyProfileResponse,
    FormulaFamiliesResponse,
    HealthResponse,
    ImportResponse,
    MaterialListResponse,
    RestoreTemplatesResponse,
    MaterialSaveResponse,
    SeedResponse,
)

__all__ = [
    # Requests
    "BatchRequest",
    "MaterialRequest",
    "FormulaRequest",
    "ProductRequest",
    "NoteRequest",
    "WishlistRequest",
    "FamilyProfileRequest",
    # Responses
    "BatchFailureResponse",
    "MaterialSaveResponse",
    "MaterialListResponse",
    "RestoreTemplatesResponse",
    "FamilyProfileResponse",
    "FormulaFamiliesResponse",
    "DashboardResponse",
    "SeedResponse",
    "ImportResponse",
    "HealthResponse",
    "ErrorResponse",
]
