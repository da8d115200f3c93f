"""Catalog maintenance endpoints: seeding, templates, reload, clear."""

from fastapi import APIRouter, Depends, Response, status

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.responses import RestoreTemplatesResponse, SeedResponse
from moleculex.core.services import aggregates

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.post("/seed", response_model=SeedResponse)
async def seed_catalog(store: DomainStore = Depends(get_store)) -> SeedResponse:
    """Import the built-in core materials, skipping ones already stored."""
    report = await store.seed_core_catalog()
    return SeedResponse(
        succeeded=report.succeeded,
        skipped=report.skipped,
        failed=report.failed,
        batch_failures=report.batch_failures,
        total_materials=len(store.materials),
    )


@router.post("/restore-templates", response_model=RestoreTemplatesResponse)
async def restore_templates(store: DomainStore = Depends(get_store)) -> RestoreTemplatesResponse:
    """Re-add missing built-in materials, formulas, products, notes and wishlist items."""
    restored = store.restore_templates()
    return RestoreTemplatesResponse(
        materials=aggregates.material_views(restored.materials),
        formulas=restored.formulas,
        finished_products=restored.finished_products,
        notes_added=len(restored.notes),
        wishlist_added=len(restored.wishlist),
        total=restored.total,
    )


@router.post("/reload", status_code=status.HTTP_204_NO_CONTENT)
async def reload(store: DomainStore = Depends(get_store)) -> Response:
    await store.load()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/clear", status_code=status.HTTP_204_NO_CONTENT)
async def clear_all(store: DomainStore = Depends(get_store)) -> Response:
    """Empty the working set. The remote store is untouched."""
    store.clear_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
