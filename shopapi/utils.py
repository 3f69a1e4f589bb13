"""Small helpers: field copying, order codes and password hashing."""

from __future__ import annotations

import copy
import dataclasses
import inspect
import logging
import random
from datetime import datetime
from typing import Any, Mapping

import bcrypt

logger = logging.getLogger(__name__)

CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
RAND_LENGTH = 5
BCRYPT_MIN_COST = 4
BCRYPT_MAX_PASSWORD_BYTES = 72

_random = random.SystemRandom()


def _fields_of(obj: Any) -> dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {spec.name: getattr(obj, spec.name) for spec in dataclasses.fields(obj)}
    return {key: value for key, value in vars(obj).items() if not key.startswith("_")}


def convert(src: Any, dest_type: type) -> Any:
    """Build a ``dest_type`` from the same-named fields of ``src``.

    Fields the destination does not know are dropped; values are deep copies.
    """
    values = copy.deepcopy(_fields_of(src))
    if dest_type is dict:
        return values
    if dataclasses.is_dataclass(dest_type):
        names = {spec.name for spec in dataclasses.fields(dest_type) if spec.init}
        return dest_type(**{k: v for k, v in values.items() if k in names})

    target = dest_type()
    for key, value in values.items():
        if not hasattr(target, key):
            continue
        if inspect.isroutine(getattr(dest_type, key, None)):
            continue
        setattr(target, key, value)
    return target


def generate_code(prefix: str) -> str:
    """Return an upper-case code: prefix, today's date as YYMMDD, five random characters."""
    today = datetime.now().strftime("%y%m%d")
    suffix = "".join(_random.choices(CHARSET, k=RAND_LENGTH))
    return f"{prefix}{today}{suffix}".upper()


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def hash_and_salt(password: str | bytes) -> str:
    """Hash a password with bcrypt; return an empty string when it cannot be hashed."""
    raw = _as_bytes(password)
    if len(raw) > BCRYPT_MAX_PASSWORD_BYTES:
        logger.error("Failed to generate password: password length exceeds 72 bytes")
        return ""
    try:
        hashed = bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_MIN_COST))
    except ValueError as exc:
        logger.error("Failed to generate password: %s", exc)
        return ""
    return hashed.decode("ascii")


def check_password(hashed: str | bytes, password: str | bytes) -> bool:
    """Tell whether ``password`` matches the bcrypt ``hashed`` value."""
    try:
        return bcrypt.checkpw(_as_bytes(password), _as_bytes(hashed))
    except ValueError:
        return False