"""Dict-backed UserRepository for tests and local experiments."""

import threading

from app.core.exceptions import DuplicateKeyError, RecordNotFoundError
from app.models.user import User


class InMemoryUserRepository:
    """
    Keeps transient User objects keyed by id.

    Enforces username uniqueness inside create() like the users table's
    unique index does. Ids start at 1.
    """

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._users)

    def _find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def exists_by_username(self, username: str) -> bool:
        with self._lock:
            return self._find_by_username(username) is not None

    def create(self, user: User) -> None:
        with self._lock:
            if self._find_by_username(user.username) is not None:
                raise DuplicateKeyError()
            user.id = self._next_id
            self._next_id += 1
            self._users[user.id] = user

    def get_by_username(self, username: str) -> User:
        with self._lock:
            user = self._find_by_username(username)
        if user is None:
            raise RecordNotFoundError()
        return user

    def get_by_id(self, user_id: int) -> User:
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise RecordNotFoundError()
        return user

    def update_password(self, user_id: int, password_hash: str) -> None:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise RecordNotFoundError()
            user.password_hash = password_hash
