"""
Folders API Endpoints.

REST API endpoints for the caller's folders.
"""

from fastapi import APIRouter, Response

from notelens.backend.core.dependencies import CurrentPrincipal, FolderServiceDep, RequestId
from notelens.backend.schemas.base import ApiResponse, ResponseMetadata
from notelens.backend.schemas.folder import FolderCreate, FolderResponse, FolderUpdate
from notelens.backend.schemas.note import NoteResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[FolderResponse]],
    summary="List folders",
    description="List the caller's folders ordered by name.",
)
async def list_folders(
    principal: CurrentPrincipal,
    service: FolderServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[FolderResponse]]:
    folders = await service.list_folders(principal)
    return ApiResponse(
        data=[FolderResponse.model_validate(folder) for folder in folders],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[FolderResponse],
    status_code=201,
    summary="Create a folder",
)
async def create_folder(
    data: FolderCreate,
    principal: CurrentPrincipal,
    service: FolderServiceDep,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = await service.create_folder(principal, data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Get a folder",
)
async def get_folder(
    folder_id: str,
    principal: CurrentPrincipal,
    service: FolderServiceDep,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = await service.get_folder(principal, folder_id)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{folder_id}/notes",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes in a folder",
    description="List the caller's notes filed under the folder, most recently updated first.",
)
async def list_folder_notes(
    folder_id: str,
    principal: CurrentPrincipal,
    service: FolderServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await service.list_folder_notes(principal, folder_id)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{folder_id}",
    response_model=ApiResponse[FolderResponse],
    summary="Rename a folder",
)
async def update_folder(
    folder_id: str,
    data: FolderUpdate,
    principal: CurrentPrincipal,
    service: FolderServiceDep,
    request_id: RequestId,
) -> ApiResponse[FolderResponse]:
    folder = await service.update_folder(principal, folder_id, data)
    return ApiResponse(
        data=FolderResponse.model_validate(folder),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{folder_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a folder",
    description="Delete the folder and every note of the caller filed under it.",
)
async def delete_folder(
    folder_id: str,
    principal: CurrentPrincipal,
    service: FolderServiceDep,
) -> Response:
    await service.delete_folder(principal, folder_id)
    return Response(status_code=204)
