"""Olfactive family profile endpoints."""

from fastapi import APIRouter, Depends

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.requests import FamilyProfileRequest
from moleculex.application.dto.responses import FamilyProfileResponse
from moleculex.core.entities import FamilyProfile, OlfactiveFamily

router = APIRouter(prefix="/api/families", tags=["families"])


@router.get("", response_model=list[FamilyProfileResponse])
async def list_family_profiles(store: DomainStore = Depends(get_store)) -> list[FamilyProfileResponse]:
    profiles = store.family_profiles
    return [FamilyProfileResponse(family=f, profile=profiles.get(f)) for f in OlfactiveFamily]


@router.get("/{family}", response_model=FamilyProfileResponse)
async def get_family_profile(
    family: OlfactiveFamily,
    store: DomainStore = Depends(get_store),
) -> FamilyProfileResponse:
    return FamilyProfileResponse(family=family, profile=store.family_profiles.get(family))


@router.put("/{family}", response_model=FamilyProfileResponse)
async def update_family_profile(
    family: OlfactiveFamily,
    request: FamilyProfileRequest,
    store: DomainStore = Depends(get_store),
) -> FamilyProfileResponse:
    profile = FamilyProfile(main_character=request.main_character, description=request.description)
    profiles = await store.update_family_profile(family, profile)
    return FamilyProfileResponse(family=family, profile=profiles.get(family))
