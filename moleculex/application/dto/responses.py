"""Response DTOs for the HTTP surface."""

from datetime import datetime

from pydantic import BaseModel, Field

from moleculex.core.entities import (
    ActivityEvent,
    DashboardStats,
    FamilyProfile,
    FamilyShare,
    FinishedProduct,
    Formula,
    MaterialView,
    OlfactiveFamily,
)


class BatchFailureResponse(BaseModel):
    batch_id: str
    error: str


class MaterialSaveResponse(BaseModel):
    """Result of saving a material."""

    material: MaterialView
    created: bool
    batches_inserted: int = 0
    batches_updated: int = 0
    batch_failures: list[BatchFailureResponse] = Field(default_factory=list)


class MaterialListResponse(BaseModel):
    materials: list[MaterialView]
    total: int


class FamilyProfileResponse(BaseModel):
    family: OlfactiveFamily
    profile: FamilyProfile


class FormulaFamiliesResponse(BaseModel):
    formula_id: str
    families: list[FamilyShare]


class DashboardResponse(BaseModel):
    """Everything the dashboard shows in one call."""

    stats: DashboardStats
    recent_activity: list[ActivityEvent]
    recent_formulas: list[Formula]


class SeedResponse(BaseModel):
    succeeded: int
    skipped: int
    failed: int
    batch_failures: int
    total_materials: int


class RestoreTemplatesResponse(BaseModel):
    """Template entities added to the working set."""

    materials: list[MaterialView]
    formulas: list[Formula]
    finished_products: list[FinishedProduct]
    notes_added: int
    wishlist_added: int
    total: int


class ImportResponse(BaseModel):
    applied_fields: list[str]
    version: int


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    backend: str | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ENTITY_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
