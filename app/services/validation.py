"""
Field-level rules for account input.

Creation reports every problem with its field. Login and password change
collapse all problems into a single opaque outcome so that a failed login
never says which field was wrong.
"""

from app.core.exceptions import FieldValidationError
from app.schemas.auth import CreateUserRequest, LoginRequest, PasswordChangeRequest

USERNAME_MIN_LEN = 3
# users.username is VARCHAR(255)
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 4


def _too_short(value: str, min_len: int) -> bool:
    # len() on str counts code points, not bytes
    return len(value) < min_len


def validate_user_creation(data: CreateUserRequest) -> list[FieldValidationError]:
    """Return all validation errors for a new account; empty list when valid."""
    errors: list[FieldValidationError] = []

    if data.username == "":
        errors.append(FieldValidationError("username", "username is required"))
    if _too_short(data.username, USERNAME_MIN_LEN):
        errors.append(
            FieldValidationError(
                "username", f"username must be at least {USERNAME_MIN_LEN} characters long"
            )
        )
    if len(data.username) > USERNAME_MAX_LEN:
        errors.append(
            FieldValidationError(
                "username", f"username must be at most {USERNAME_MAX_LEN} characters long"
            )
        )

    if data.password == "":
        errors.append(FieldValidationError("password", "password is required"))
    if _too_short(data.password, PASSWORD_MIN_LEN):
        errors.append(
            FieldValidationError(
                "password", f"password must be at least {PASSWORD_MIN_LEN} characters long"
            )
        )

    return errors


def validate_login_credentials(data: LoginRequest) -> bool:
    """True when the credentials are well-formed enough to look up."""
    if data.username == "" or data.password == "":
        return False
    return not (
        _too_short(data.username, USERNAME_MIN_LEN) or _too_short(data.password, PASSWORD_MIN_LEN)
    )


def validate_new_password(data: PasswordChangeRequest) -> bool:
    """True when the new password is non-empty and long enough."""
    return data.password != "" and not _too_short(data.password, PASSWORD_MIN_LEN)
