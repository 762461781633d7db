"""Request/response schemas for auth and account endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import Role


class CreateUserRequest(BaseModel):
    """Input for account creation. Lengths are checked by the validation rules, not here."""

    username: str = Field(default="", description="Username (3 to 255 characters)")
    password: str = Field(default="", description="Password (at least 4 characters)")
    is_admin: bool = Field(default=False, description="Grant the administrator role")


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(default="", description="Username")
    password: str = Field(default="", description="Password")


class PasswordChangeRequest(BaseModel):
    """New password for the current account."""

    password: str = Field(default="", description="New password (at least 4 characters)")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class UserInfo(BaseModel):
    """Account as exposed over the API (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    is_admin: bool
    role: Role


class CurrentUser(BaseModel):
    """Authenticated caller (id, username, role) for dependency injection."""

    id: int
    username: str
    role: Role


class FieldErrorItem(BaseModel):
    """One field-scoped validation problem."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Response body for rejected account creation input."""

    errors: list[FieldErrorItem]
