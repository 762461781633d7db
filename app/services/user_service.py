"""Account service: creation, login, token issuance, password change and default-admin bootstrap."""

import logging

from app.core.exceptions import (
    BootstrapError,
    DuplicateKeyError,
    FieldValidationError,
    InvalidCredentialsError,
    InvalidPasswordError,
    MalformedHashError,
    PasswordUnchangedError,
    RecordNotFoundError,
)
from app.core.security import BCRYPT_ROUNDS, TokenIssuer, hash_password, verify_password
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import CreateUserRequest, LoginRequest, PasswordChangeRequest
from app.services.validation import (
    validate_login_credentials,
    validate_new_password,
    validate_user_creation,
)

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"


class UserService:
    """
    Orchestrates validation, the account store, password hashing and token issuance.

    Holds no mutable state of its own; the repository and issuer are injected.
    Username uniqueness is checked before insert, but the check and the insert
    are not atomic: two concurrent sign-ups can both pass the check, and the
    store's unique constraint is what rejects the second one (DuplicateKeyError).
    """

    def __init__(
        self,
        repo: UserRepository,
        token_issuer: TokenIssuer,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self.repo = repo
        self.token_issuer = token_issuer
        self.bcrypt_rounds = bcrypt_rounds

    def validate_user_creation(self, data: CreateUserRequest) -> list[FieldValidationError]:
        """Validate creation input. Callers run this before create_user, which does not re-validate."""
        return validate_user_creation(data)

    def create_user(self, data: CreateUserRequest) -> User:
        """
        Persist a new account with a hashed password.

        Raises DuplicateKeyError if the username is taken and PasswordHashError
        for a password bcrypt cannot hash; store errors propagate unchanged.
        """
        if self.repo.exists_by_username(data.username):
            raise DuplicateKeyError()

        password_hash = hash_password(data.password, rounds=self.bcrypt_rounds)
        user = User(username=data.username, password_hash=password_hash, is_admin=data.is_admin)
        self.repo.create(user)
        logger.info("Created user: id=%s username=%s is_admin=%s", user.id, user.username, user.is_admin)
        return user

    def authenticate(self, data: LoginRequest) -> User:
        """
        Return the account matching the credentials.

        Raises InvalidCredentialsError for malformed input or a wrong password.
        Errors from the username lookup, RecordNotFoundError included, are
        raised as-is.
        """
        if not validate_login_credentials(data):
            raise InvalidCredentialsError()

        user = self.repo.get_by_username(data.username)
        if not user.id:
            raise InvalidCredentialsError()

        try:
            matches = verify_password(data.password, user.password_hash)
        except MalformedHashError:
            logger.warning("Stored password hash is malformed: id=%s", user.id)
            matches = False
        if not matches:
            logger.info("Failed login: username=%s", data.username)
            raise InvalidCredentialsError()

        return user

    def create_access_token(self, data: LoginRequest) -> str:
        """Authenticate and return a signed access token carrying the account id and role."""
        user = self.authenticate(data)
        return self.token_issuer.issue_token(user.id, bool(user.is_admin))

    def update_password(self, user_id: int, data: PasswordChangeRequest) -> None:
        """
        Replace the account's password hash.

        Raises InvalidPasswordError for a bad new password, RecordNotFoundError
        for an unknown account and PasswordUnchangedError when the new password
        equals the current one. PasswordHashError from hashing propagates.
        """
        if not validate_new_password(data):
            raise InvalidPasswordError()

        user = self.repo.get_by_id(user_id)
        if not user.id:
            raise RecordNotFoundError()

        try:
            unchanged = verify_password(data.password, user.password_hash)
        except MalformedHashError:
            # a corrupt hash cannot equal anything; let the change overwrite it
            logger.warning("Replacing malformed password hash: id=%s", user.id)
            unchanged = False
        if unchanged:
            raise PasswordUnchangedError()

        password_hash = hash_password(data.password, rounds=self.bcrypt_rounds)
        self.repo.update_password(user.id, password_hash)
        logger.info("Password updated: id=%s", user.id)

    def get_infos(self, user_id: int) -> User:
        """Return the account with the given id; lookup errors propagate."""
        return self.repo.get_by_id(user_id)

    def ensure_default_admin(
        self,
        username: str = DEFAULT_ADMIN_USERNAME,
        password: str = DEFAULT_ADMIN_PASSWORD,
    ) -> User:
        """
        Create the default administrator if it does not exist yet. Idempotent.

        Any failure other than "not found" on the initial lookup is raised as
        BootstrapError; the process entry point decides whether to stop.
        """
        try:
            admin = self.repo.get_by_username(username)
        except RecordNotFoundError:
            admin = None
        except Exception as e:
            raise BootstrapError(f"Failed to look up default admin user: {e}", cause=e) from e

        if admin is not None and admin.id:
            logger.info("Default admin already exists: id=%s", admin.id)
            return admin

        try:
            password_hash = hash_password(password, rounds=self.bcrypt_rounds)
            admin = User(username=username, password_hash=password_hash, is_admin=True)
            self.repo.create(admin)
        except Exception as e:
            raise BootstrapError(f"Failed to create default admin user: {e}", cause=e) from e

        logger.info("Default admin user created: id=%s username=%s", admin.id, admin.username)
        return admin
