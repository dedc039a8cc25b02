"""
Users API Endpoints.

Registration needs no identity header; the returned id is what clients
send as x-user-id afterwards.
"""

from fastapi import APIRouter

from notelens.backend.core.dependencies import Config, CurrentPrincipal, RequestId, UserServiceDep
from notelens.backend.core.exceptions import FeatureDisabledError
from notelens.backend.schemas.base import ApiResponse, ResponseMetadata
from notelens.backend.schemas.user import UserCreate, UserResponse

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=201,
    summary="Register a user",
)
async def register_user(
    data: UserCreate,
    service: UserServiceDep,
    config: Config,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    if not config.features.user_registration_enabled:
        raise FeatureDisabledError("User registration is disabled")

    user = await service.register(data)
    return ApiResponse(
        data=UserResponse.model_validate(user),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Get the calling user",
)
async def get_me(
    principal: CurrentPrincipal,
    service: UserServiceDep,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    user = await service.get_current_user(principal)
    return ApiResponse(
        data=UserResponse.model_validate(user),
        metadata=ResponseMetadata(request_id=request_id),
    )
