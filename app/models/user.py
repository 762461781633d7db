"""ORM model for user accounts (credentials and administrator flag)."""

from enum import Enum

from sqlalchemy import Boolean, Column, Integer, String, false

from app.models.base import Base


class Role(str, Enum):
    """The two roles carried in access tokens, derived from User.is_admin."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def from_admin_flag(cls, is_admin: bool) -> "Role":
        return cls.ADMIN if is_admin else cls.USER


class User(Base):
    """
    User account for JWT authentication.

    password_hash always holds a bcrypt hash, never the plain password.
    id is assigned by the database and never changes afterwards.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    @property
    def role(self) -> Role:
        return Role.from_admin_flag(bool(self.is_admin))

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r}, is_admin={self.is_admin!r})"
