"""
Notes API Endpoints.

REST API endpoints for the caller's notes.
"""

from fastapi import APIRouter, Response

from notelens.backend.core.dependencies import CurrentPrincipal, NoteServiceDep, RequestId
from notelens.backend.schemas.base import ApiResponse, ResponseMetadata
from notelens.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="List the caller's notes, most recently updated first.",
)
async def list_notes(
    principal: CurrentPrincipal,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await service.list_notes(principal)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note. Notes of other users are reported as not found.",
)
async def get_note(
    note_id: str,
    principal: CurrentPrincipal,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await service.get_note(principal, note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a new note, optionally filed under a folder.",
)
async def create_note(
    data: NoteCreate,
    principal: CurrentPrincipal,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await service.create_note(principal, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Change any of title, content and folder. Omitted fields are left as they are.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    principal: CurrentPrincipal,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await service.update_note(principal, note_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    principal: CurrentPrincipal,
    service: NoteServiceDep,
) -> Response:
    await service.delete_note(principal, note_id)
    return Response(status_code=204)
