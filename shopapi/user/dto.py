"""Request and response shapes for the user endpoints."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

MIN_PASSWORD_LENGTH = 6

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(ValueError):
    """A request body is malformed or breaks a field rule."""


def _string_fields(cls: type, data: Any) -> dict[str, str]:
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    values: dict[str, str] = {}
    for spec in fields(cls):
        value = data.get(spec.name)
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValidationError(f"{spec.name} must be a string")
        values[spec.name] = value
    return values


def _require(name: str, value: str) -> None:
    if not value:
        raise ValidationError(f"{name} is required")


def _check_email(name: str, value: str) -> None:
    _require(name, value)
    if not _EMAIL_PATTERN.match(value):
        raise ValidationError(f"{name} is not a valid email address")


def _check_password(name: str, value: str) -> None:
    _require(name, value)
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"{name} must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


@dataclass
class UserOut:
    """The public view of a user."""

    id: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: Any) -> UserOut:
        return cls(
            id=user.id,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class RegisterRequest:
    """Body of a registration request."""

    email: str = ""
    password: str = ""

    @classmethod
    def from_json(cls, data: Any) -> RegisterRequest:
        """Bind a decoded JSON body; raise ValidationError on wrong shapes or types."""
        return cls(**_string_fields(cls, data))

    def validate(self) -> None:
        _check_email("email", self.email)
        _check_password("password", self.password)


@dataclass
class ChangePasswordRequest:
    """Body of a password change request."""

    password: str = ""
    new_password: str = ""

    @classmethod
    def from_json(cls, data: Any) -> ChangePasswordRequest:
        """Bind a decoded JSON body; raise ValidationError on wrong shapes or types."""
        return cls(**_string_fields(cls, data))

    def validate(self) -> None:
        _check_password("password", self.password)
        _check_password("new_password", self.new_password)