"""Persistence contract for user accounts and its SQLAlchemy implementation."""

import logging
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateKeyError, RecordNotFoundError
from app.models.user import User

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """
    Operations the account service needs from persistence.

    Lookups raise RecordNotFoundError when nothing matches; create raises
    DuplicateKeyError when the store's own unique constraint on username fires.
    """

    def exists_by_username(self, username: str) -> bool: ...

    def create(self, user: User) -> None: ...

    def get_by_username(self, username: str) -> User: ...

    def get_by_id(self, user_id: int) -> User: ...

    def update_password(self, user_id: int, password_hash: str) -> None: ...


class SQLAlchemyUserRepository:
    """UserRepository backed by the users table. One instance per DB session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def exists_by_username(self, username: str) -> bool:
        return self.db.query(User.id).filter(User.username == username).first() is not None

    def create(self, user: User) -> None:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Rejected duplicate username at insert: username=%s", user.username)
            raise DuplicateKeyError(cause=e) from e
        self.db.refresh(user)

    def get_by_username(self, username: str) -> User:
        user = self.db.query(User).filter(User.username == username).first()
        if user is None:
            raise RecordNotFoundError()
        return user

    def get_by_id(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise RecordNotFoundError()
        return user

    def update_password(self, user_id: int, password_hash: str) -> None:
        updated = (
            self.db.query(User)
            .filter(User.id == user_id)
            .update({User.password_hash: password_hash}, synchronize_session="fetch")
        )
        self.db.commit()
        if updated == 0:
            raise RecordNotFoundError()
