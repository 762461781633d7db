"""
CLI entrypoint that creates the default admin account if it is missing:

  python -m app.bootstrap

The API runs the same step at startup. Exit code 1 means the store could not
be read or the account could not be created.
"""

import logging
import sys
from typing import TYPE_CHECKING

from app.core.database import SessionLocal
from app.core.exceptions import BootstrapError
from app.core.logging import configure_logging
from app.core.security import TokenIssuer
from app.models.user import User
from app.repositories.user_repository import SQLAlchemyUserRepository
from app.services.user_service import UserService

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_bootstrap(settings: "Settings") -> User:
    """Ensure the default admin exists using a fresh DB session. Raises BootstrapError."""
    db = SessionLocal()
    try:
        service = UserService(
            SQLAlchemyUserRepository(db),
            TokenIssuer.from_settings(settings),
            settings.BCRYPT_ROUNDS,
        )
        return service.ensure_default_admin(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password=settings.DEFAULT_ADMIN_PASSWORD.get_secret_value(),
        )
    finally:
        db.close()


def main() -> int:
    """Run the default-admin bootstrap once."""
    from app.core.config import get_settings

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        admin = run_bootstrap(settings)
    except BootstrapError as e:
        logger.critical("Default admin bootstrap failed: %s", e)
        return 1
    logger.info("Default admin ready: id=%s username=%s", admin.id, admin.username)
    return 0


if __name__ == "__main__":
    sys.exit(main())
