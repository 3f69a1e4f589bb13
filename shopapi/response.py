"""JSON response envelopes: ``{"result": ..., "error": ...}``."""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from enum import Enum
from typing import Any

from flask import Response

from .config import PRODUCTION_ENV, Settings, get_config


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def success_body(data: Any) -> dict[str, Any]:
    """Envelope for a successful result."""
    return {"result": data, "error": None}


def error_body(error: BaseException | str, message: str, settings: Settings) -> dict[str, Any]:
    """Envelope for an error; outside production it carries the error text as ``debug``."""
    details: dict[str, Any] = {"message": message}
    if settings.environment != PRODUCTION_ENV:
        details["debug"] = str(error)
    return {"result": None, "error": details}


def _respond(body: dict[str, Any], status: int) -> Response:
    return Response(
        json.dumps(body, default=_json_default),
        status=status,
        mimetype="application/json",
    )


def json_response(data: Any, status: int = 200) -> Response:
    """Build a JSON response holding ``data`` as the result."""
    return _respond(success_body(data), status)


def error_response(status: int, error: BaseException | str, message: str) -> Response:
    """Build a JSON error response using the loaded settings."""
    return _respond(error_body(error, message, get_config()), status)