"""Formula endpoints."""

from fastapi import APIRouter, Depends, Response, status

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.requests import FormulaRequest
from moleculex.application.dto.responses import ErrorResponse, FormulaFamiliesResponse
from moleculex.core.entities import Formula

router = APIRouter(prefix="/api/formulas", tags=["formulas"])


def _to_formula(request: FormulaRequest, existing: Formula | None = None) -> Formula:
    data = request.model_dump()
    if existing is None:
        return Formula(**data)
    return Formula(**data, identity=existing.identity, created_at=existing.created_at)


@router.get("", response_model=list[Formula])
async def list_formulas(store: DomainStore = Depends(get_store)) -> list[Formula]:
    return list(store.formulas)


@router.get("/{formula_id}", response_model=Formula, responses={404: {"model": ErrorResponse}})
async def get_formula(formula_id: str, store: DomainStore = Depends(get_store)) -> Formula:
    return store.get_formula(formula_id)


@router.post(
    "",
    response_model=Formula,
    status_code=status.HTTP_201_CREATED,
    responses={502: {"model": ErrorResponse}},
)
async def create_formula(request: FormulaRequest, store: DomainStore = Depends(get_store)) -> Formula:
    result = await store.save_formula(_to_formula(request))
    return result.entity


@router.put(
    "/{formula_id}",
    response_model=Formula,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def update_formula(
    formula_id: str,
    request: FormulaRequest,
    store: DomainStore = Depends(get_store),
) -> Formula:
    existing = store.get_formula(formula_id)
    result = await store.save_formula(_to_formula(request, existing))
    return result.entity


@router.delete(
    "/{formula_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_formula(formula_id: str, store: DomainStore = Depends(get_store)) -> Response:
    await store.delete_formula(formula_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{formula_id}/families",
    response_model=FormulaFamiliesResponse,
    responses={404: {"model": ErrorResponse}},
)
async def formula_families(
    formula_id: str,
    full: bool = False,
    store: DomainStore = Depends(get_store),
) -> FormulaFamiliesResponse:
    """Olfactive family weights of a formula; the top few unless full=true."""
    families = store.family_distribution(formula_id) if full else store.top_families(formula_id)
    return FormulaFamiliesResponse(formula_id=formula_id, families=families)
