"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CreateUserRequest,
    CurrentUser,
    FieldErrorItem,
    LoginRequest,
    PasswordChangeRequest,
    TokenResponse,
    UserInfo,
    ValidationErrorResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "CreateUserRequest",
    "CurrentUser",
    "FieldErrorItem",
    "HealthResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "TokenResponse",
    "UserInfo",
    "ValidationErrorResponse",
]
