from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field

from realty_auth.api.error import ClientError, ServerError
from realty_auth.api.response import ApiResponse
from realty_auth.app.services.unit_of_work import UnitOfWork
from realty_auth.app.use_cases.auth import CamelModel, UserResponse
from realty_auth.app.use_cases.users import (
    GetCurrentUserUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from realty_auth.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["User"])


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
)
async def get_me(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Load the user behind the access token.

    Raises:
        - 401 Unauthorized: Missing/invalid token, or the user no longer exists
    """
    result = await GetCurrentUserUseCase(uow).execute(current_user.get("userId"))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return ApiResponse(data=result.value)


class UpdateProfileRequest(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = Field(None, max_length=20)


@router.put(
    "/profile",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
)
async def update_profile(
    request: UpdateProfileRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Partially update first name, last name and phone.

    Raises:
        - 401 Unauthorized: Missing/invalid token, or the user no longer exists
    """
    command = UpdateProfileCommand(
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
    )
    result = await UpdateProfileUseCase(uow).execute(current_user.get("userId"), command)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return ApiResponse(message="Profile updated successfully", data=result.value)
