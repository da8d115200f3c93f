"""Material and inventory batch endpoints."""

from fastapi import APIRouter, Depends, Response, status

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore, SaveResult
from moleculex.application.dto.requests import BatchRequest, MaterialRequest
from moleculex.application.dto.responses import (
    BatchFailureResponse,
    ErrorResponse,
    MaterialListResponse,
    MaterialSaveResponse,
)
from moleculex.core.entities import InventoryBatch, Material, MaterialView, ScentNote
from moleculex.core.services import aggregates

router = APIRouter(prefix="/api/materials", tags=["materials"])


def _to_batch(request: BatchRequest) -> InventoryBatch:
    return InventoryBatch.model_validate(request.model_dump())


def _to_material(request: MaterialRequest, existing: Material | None = None) -> Material:
    data = request.model_dump(exclude={"inventory_batches"})
    batches = [_to_batch(b) for b in request.inventory_batches]
    if existing is None:
        return Material(**data, inventory_batches=batches)
    return Material(
        **data,
        identity=existing.identity,
        created_at=existing.created_at,
        inventory_batches=batches,
    )


def _to_response(result: SaveResult[Material]) -> MaterialSaveResponse:
    batches = result.batches
    return MaterialSaveResponse(
        material=aggregates.material_view(result.entity),
        created=result.created,
        batches_inserted=batches.inserted if batches else 0,
        batches_updated=batches.updated if batches else 0,
        batch_failures=[
            BatchFailureResponse(batch_id=f.batch_id, error=f.error)
            for f in (batches.failures if batches else [])
        ],
    )


@router.get("", response_model=MaterialListResponse)
async def list_materials(store: DomainStore = Depends(get_store)) -> MaterialListResponse:
    """List materials with derived stock figures."""
    views = store.material_views()
    return MaterialListResponse(materials=views, total=len(views))


@router.get(
    "/{material_id}",
    response_model=MaterialView,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(material_id: str, store: DomainStore = Depends(get_store)) -> MaterialView:
    return store.material_view(material_id)


@router.post(
    "",
    response_model=MaterialSaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses={502: {"model": ErrorResponse}},
)
async def create_material(
    request: MaterialRequest,
    store: DomainStore = Depends(get_store),
) -> MaterialSaveResponse:
    """Create a material and its batches."""
    result = await store.save_material(_to_material(request))
    return _to_response(result)


@router.put(
    "/{material_id}",
    response_model=MaterialSaveResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def update_material(
    material_id: str,
    request: MaterialRequest,
    store: DomainStore = Depends(get_store),
) -> MaterialSaveResponse:
    """
    Replace a material's fields and save its batches.

    Listed batches are inserted or updated. Batches left out of the request
    are not deleted remotely and come back on the next reload.
    """
    existing = store.get_material(material_id)
    result = await store.save_material(_to_material(request, existing))
    return _to_response(result)


@router.delete(
    "/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_material(material_id: str, store: DomainStore = Depends(get_store)) -> Response:
    await store.delete_material(material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{material_id}/batches",
    response_model=MaterialSaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def add_batch(
    material_id: str,
    request: BatchRequest,
    store: DomainStore = Depends(get_store),
) -> MaterialSaveResponse:
    """Receive a new inventory batch for a material."""
    result = await store.add_batch(material_id, _to_batch(request))
    return _to_response(result)


@router.get(
    "/{material_id}/notes",
    response_model=list[ScentNote],
    responses={404: {"model": ErrorResponse}},
)
async def list_material_notes(
    material_id: str,
    store: DomainStore = Depends(get_store),
) -> list[ScentNote]:
    store.get_material(material_id)
    return store.notes_for(material_id)
