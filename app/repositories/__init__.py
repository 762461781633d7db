"""Account store: the repository contract and its implementations."""

from app.repositories.memory import InMemoryUserRepository
from app.repositories.user_repository import SQLAlchemyUserRepository, UserRepository

__all__ = ["InMemoryUserRepository", "SQLAlchemyUserRepository", "UserRepository"]
