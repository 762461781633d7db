"""JWT login and auth dependencies (get_user_service, get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import InvalidCredentialsError, RecordNotFoundError, TokenSigningError
from app.core.security import TokenIssuer
from app.models.user import Role
from app.repositories.user_repository import SQLAlchemyUserRepository
from app.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_issuer() -> TokenIssuer:
    """Dependency: token issuer configured from JWT_* settings."""
    return TokenIssuer.from_settings(settings)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> UserService:
    """Dependency: account service bound to the request's DB session."""
    return UserService(SQLAlchemyUserRepository(db), issuer, settings.BCRYPT_ROUNDS)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token valid for 24 hours.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        token = service.create_access_token(body)
    except (InvalidCredentialsError, RecordNotFoundError):
        # unknown username and wrong password get the same response
        raise _unauthorized("Invalid username or password.")
    except TokenSigningError as e:
        logger.error("Could not sign access token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create access token.",
        )
    return TokenResponse(access_token=token, token_type="bearer")


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = issuer.decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        user_id = int(payload["ID"])
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    try:
        user = service.get_infos(user_id)
    except RecordNotFoundError:
        raise _unauthorized("User not found")
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
