"""
Create a user from the command line. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--admin]
Example:
  python -m app.scripts.create_user alice s3cret --admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.exceptions import DuplicateKeyError, PasswordHashError
from app.core.logging import configure_logging
from app.core.security import TokenIssuer
from app.repositories.user_repository import SQLAlchemyUserRepository
from app.schemas.auth import CreateUserRequest
from app.services.user_service import UserService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an account (no registration UI).")
    parser.add_argument("username", help="Username (at least 3 characters)")
    parser.add_argument("password", help="Password (at least 4 characters)")
    parser.add_argument("--admin", action="store_true", help="Grant the administrator role")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logging.getLogger("app").setLevel(logging.WARNING)

    request = CreateUserRequest(username=args.username.strip(), password=args.password, is_admin=args.admin)

    db = SessionLocal()
    try:
        service = UserService(
            SQLAlchemyUserRepository(db),
            TokenIssuer.from_settings(settings),
            settings.BCRYPT_ROUNDS,
        )
        errors = service.validate_user_creation(request)
        if errors:
            for error in errors:
                print(f"{error.field}: {error.message}", file=sys.stderr)
            return 1
        try:
            user = service.create_user(request)
        except DuplicateKeyError:
            print(f"User '{request.username}' already exists.", file=sys.stderr)
            return 1
        except PasswordHashError as e:
            print(f"password: {e.message}", file=sys.stderr)
            return 1
        print(f"Created user '{user.username}' (id={user.id}, role={user.role.value}).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
