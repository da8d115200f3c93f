"""Wishlist endpoints."""

from fastapi import APIRouter, Depends, Response, status

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.requests import WishlistRequest
from moleculex.application.dto.responses import ErrorResponse
from moleculex.core.entities import WishlistItem
from moleculex.core.exceptions import ValidationError

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.get("", response_model=list[WishlistItem])
async def list_wishlist(store: DomainStore = Depends(get_store)) -> list[WishlistItem]:
    return list(store.wishlist)


@router.post(
    "",
    response_model=WishlistItem,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def add_wishlist_item(
    request: WishlistRequest,
    store: DomainStore = Depends(get_store),
) -> WishlistItem:
    item = await store.add_wishlist_item(request.name, request.note)
    if item is None:
        raise ValidationError("name", "must not be blank", request.name)
    return item


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def remove_wishlist_item(item_id: str, store: DomainStore = Depends(get_store)) -> Response:
    await store.remove_wishlist_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
