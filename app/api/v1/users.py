"""Account endpoints: create (admin only), own account info, password change."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from app.api.v1.auth import get_current_user, get_user_service, require_admin
from app.core.exceptions import (
    DuplicateKeyError,
    InvalidPasswordError,
    PasswordHashError,
    PasswordUnchangedError,
    RecordNotFoundError,
)
from app.schemas.auth import (
    CreateUserRequest,
    CurrentUser,
    FieldErrorItem,
    PasswordChangeRequest,
    UserInfo,
    ValidationErrorResponse,
)
from app.services.user_service import UserService

router = APIRouter()


@router.post(
    "",
    response_model=UserInfo,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ValidationErrorResponse}},
)
def create_user(
    body: CreateUserRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Create an account. All field problems are reported together."""
    errors = service.validate_user_creation(body)
    if errors:
        payload = ValidationErrorResponse(
            errors=[FieldErrorItem(field=e.field, message=e.message) for e in errors]
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=payload.model_dump(),
        )
    try:
        user = service.create_user(body)
    except DuplicateKeyError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists.",
        )
    except PasswordHashError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Password is too long: at most 72 bytes.",
        )
    return UserInfo.model_validate(user)


@router.get("/me", response_model=UserInfo)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserInfo:
    """Return the authenticated account."""
    try:
        user = service.get_infos(current_user.id)
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return UserInfo.model_validate(user)


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    body: PasswordChangeRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> Response:
    """Change the authenticated account's password."""
    try:
        service.update_password(current_user.id, body)
    except InvalidPasswordError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid password: at least 4 characters required.",
        )
    except PasswordHashError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Password is too long: at most 72 bytes.",
        )
    except RecordNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    except PasswordUnchangedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="New password must differ from the current password.",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
