"""User account operations."""

from __future__ import annotations

import logging

from ..utils import check_password, hash_and_salt
from .dto import ChangePasswordRequest, RegisterRequest
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class WrongPasswordError(ValueError):
    """The given current password does not match."""


class UserService:
    """Registers users, looks them up and changes their passwords."""

    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    def register(self, req: RegisterRequest) -> User:
        """Validate the request and store a new user."""
        req.validate()
        user = User(email=req.email, password=req.password)
        try:
            self._repo.create(user)
        except Exception as exc:
            logger.error("Register.Create fail, email: %s, error: %s", req.email, exc)
            raise
        return user

    def get_user_by_id(self, id: str) -> User:
        try:
            return self._repo.get_user_by_id(id)
        except Exception as exc:
            logger.error("GetUserByID fail, id: %s, error: %s", id, exc)
            raise

    def change_password(self, id: str, req: ChangePasswordRequest) -> None:
        """Replace the user's password once the current one is confirmed."""
        req.validate()
        try:
            user = self._repo.get_user_by_id(id)
        except Exception as exc:
            logger.error("ChangePassword.GetUserByID fail, id: %s, error: %s", id, exc)
            raise

        if not check_password(user.password, req.password):
            raise WrongPasswordError("wrong password")

        user.password = hash_and_salt(req.new_password)
        try:
            self._repo.update(user)
        except Exception as exc:
            logger.error("ChangePassword.Update fail, id: %s, error: %s", id, exc)
            raise