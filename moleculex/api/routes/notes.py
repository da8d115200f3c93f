"""Scent note endpoints."""

from fastapi import APIRouter, Depends, Response, status

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.requests import NoteRequest
from moleculex.application.dto.responses import ErrorResponse
from moleculex.core.entities import ScentNote
from moleculex.core.exceptions import EntityNotFoundError

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=list[ScentNote])
async def list_notes(
    material_id: str | None = None,
    store: DomainStore = Depends(get_store),
) -> list[ScentNote]:
    if material_id is not None:
        return store.notes_for(material_id)
    return list(store.notes)


@router.post("", response_model=ScentNote, status_code=status.HTTP_201_CREATED)
async def create_note(request: NoteRequest, store: DomainStore = Depends(get_store)) -> ScentNote:
    result = await store.save_note(ScentNote(material_id=request.material_id, text=request.text))
    return result.entity


@router.put("/{note_id}", response_model=ScentNote, responses={404: {"model": ErrorResponse}})
async def update_note(
    note_id: str,
    request: NoteRequest,
    store: DomainStore = Depends(get_store),
) -> ScentNote:
    existing = next((n for n in store.notes if n.id == note_id), None)
    if existing is None:
        raise EntityNotFoundError("note", note_id)
    updated = existing.model_copy(update={"material_id": request.material_id, "text": request.text})
    result = await store.save_note(updated)
    return result.entity


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_note(note_id: str, store: DomainStore = Depends(get_store)) -> Response:
    await store.delete_note(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
