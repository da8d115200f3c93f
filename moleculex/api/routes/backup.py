"""Backup export and import endpoints."""

from fastapi import APIRouter, Depends, Request, Response

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.responses import ErrorResponse, ImportResponse
from moleculex.core.services.snapshot_codec import BACKUP_FILENAME

router = APIRouter(prefix="/api/backup", tags=["backup"])


@router.get("/export")
async def export_backup(store: DomainStore = Depends(get_store)) -> Response:
    """Download the whole domain state as a JSON document."""
    return Response(
        content=store.export_snapshot_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{BACKUP_FILENAME}"'},
    )


@router.post(
    "/import",
    response_model=ImportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def import_backup(request: Request, store: DomainStore = Depends(get_store)) -> ImportResponse:
    """
    Restore collections from a backup document.

    Only collections present in the document are replaced. An invalid
    document is rejected as a whole.
    """
    patch = store.import_snapshot(await request.body())
    return ImportResponse(applied_fields=patch.present_fields(), version=patch.version)
