"""Finished product endpoints."""

from fastapi import APIRouter, Depends, Response, status

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.requests import ProductRequest
from moleculex.application.dto.responses import ErrorResponse
from moleculex.core.entities import FinishedProduct

router = APIRouter(prefix="/api/products", tags=["products"])


def _to_product(request: ProductRequest, existing: FinishedProduct | None = None) -> FinishedProduct:
    data = request.model_dump()
    if existing is None:
        return FinishedProduct(**data)
    return FinishedProduct(**data, identity=existing.identity, created_at=existing.created_at)


@router.get("", response_model=list[FinishedProduct])
async def list_products(store: DomainStore = Depends(get_store)) -> list[FinishedProduct]:
    return list(store.finished_products)


@router.get("/{product_id}", response_model=FinishedProduct, responses={404: {"model": ErrorResponse}})
async def get_product(product_id: str, store: DomainStore = Depends(get_store)) -> FinishedProduct:
    return store.get_product(product_id)


@router.post("", response_model=FinishedProduct, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductRequest,
    store: DomainStore = Depends(get_store),
) -> FinishedProduct:
    result = await store.save_product(_to_product(request))
    return result.entity


@router.put("/{product_id}", response_model=FinishedProduct, responses={404: {"model": ErrorResponse}})
async def update_product(
    product_id: str,
    request: ProductRequest,
    store: DomainStore = Depends(get_store),
) -> FinishedProduct:
    existing = store.get_product(product_id)
    result = await store.save_product(_to_product(request, existing))
    return result.entity


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(product_id: str, store: DomainStore = Depends(get_store)) -> Response:
    await store.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
