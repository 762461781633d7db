"""Error kinds raised by the account service and its collaborators."""


class AccountServiceError(Exception):
    """Base class for account and authentication errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class FieldValidationError(AccountServiceError):
    """A single field-scoped problem found while validating account creation input."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldValidationError):
            return NotImplemented
        return (self.field, self.message) == (other.field, other.message)

    def __hash__(self) -> int:
        return hash((self.field, self.message))

    def __repr__(self) -> str:
        return f"FieldValidationError(field={self.field!r}, message={self.message!r})"


class InvalidCredentialsError(AccountServiceError):
    """Login failed. Deliberately carries no detail about which field was wrong."""

    def __init__(self, message: str = "invalid credentials") -> None:
        super().__init__(message)


class InvalidPasswordError(AccountServiceError):
    """The new password given for a password change is empty or too short."""

    def __init__(self, message: str = "invalid password") -> None:
        super().__init__(message)


class DuplicateKeyError(AccountServiceError):
    """An account with the same username already exists."""

    def __init__(self, message: str = "duplicate key", cause: Exception | None = None) -> None:
        super().__init__(message, cause)


class RecordNotFoundError(AccountServiceError):
    """The requested account does not exist in the store."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


class PasswordUnchangedError(AccountServiceError):
    """The new password is the same as the current one."""

    def __init__(self, message: str = "new password must differ from the current password") -> None:
        super().__init__(message)


class MalformedHashError(AccountServiceError):
    """A stored password hash could not be parsed."""


class TokenSigningError(AccountServiceError):
    """The access token could not be signed (missing or unusable key)."""


class BootstrapError(AccountServiceError):
    """The default administrator could not be ensured at startup."""


class PasswordHashError(AccountServiceError):
    """The password could not be hashed (longer than bcrypt's 72-byte input limit)."""
