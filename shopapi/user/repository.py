"""Storage access for users."""

from __future__ import annotations

from ..dbs import Database, Query, with_query
from .model import User


class UserRepository:
    """Reads and writes users through a Database."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, user: User) -> None:
        self._db.create(user)

    def update(self, user: User) -> None:
        self._db.update(user)

    def get_user_by_id(self, id: str) -> User:
        """Return the user with ``id``; raise NotFoundError when there is none."""
        return self._db.find_by_id(User, id)

    def get_user_by_email(self, email: str) -> User:
        """Return the user with ``email``; raise NotFoundError when there is none."""
        return self._db.find_one(User, with_query(Query("email = ?", email)))