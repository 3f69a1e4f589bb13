"""JSON value cache on top of Redis."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

import redis

TIMEOUT = 1  # seconds
DEFAULT_PORT = 6379


class CacheMiss(KeyError):
    """The requested key is not in the cache."""


@dataclass(frozen=True)
class RedisConfig:
    address: str = f"localhost:{DEFAULT_PORT}"
    password: str = ""
    database: int = 0


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
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _client_for(config: RedisConfig) -> redis.Redis:
    host, sep, port = config.address.rpartition(":")
    if not sep:
        host, port = config.address, str(DEFAULT_PORT)
    return redis.Redis(
        host=host or "localhost",
        port=int(port),
        password=config.password or None,
        db=config.database,
        socket_timeout=TIMEOUT,
        socket_connect_timeout=TIMEOUT,
    )


class RedisCache:
    """Stores values as JSON under string keys."""

    def __init__(self, config: RedisConfig | None = None, client: Any = None) -> None:
        self._client = client if client is not None else _client_for(config or RedisConfig())
        try:
            self._client.ping()
        except (redis.RedisError, OSError) as exc:
            raise ConnectionError(f"cannot reach redis: {exc}") from exc

    def is_connected(self) -> bool:
        try:
            return bool(self._client.ping())
        except (redis.RedisError, OSError):
            return False

    def get(self, key: str) -> Any:
        """Return the decoded value; raise CacheMiss when the key is absent."""
        raw = self._client.get(key)
        if raw is None:
            raise CacheMiss(key)
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.set_with_expiration(key, value, None)

    def set_with_expiration(
        self, key: str, value: Any, expiration: timedelta | int | None
    ) -> None:
        """Store ``value``; a zero or missing expiration keeps it forever."""
        data = json.dumps(value, default=_json_default)
        self._client.set(key, data, ex=expiration or None)

    def remove(self, *keys: str) -> None:
        self._client.delete(*keys)

    def keys(self, pattern: str) -> list[str]:
        return [
            key.decode("utf-8") if isinstance(key, bytes) else key
            for key in self._client.keys(pattern)
        ]

    def remove_pattern(self, pattern: str) -> None:
        """Delete every key matching the glob ``pattern``."""
        matched = self.keys(pattern)
        if matched:
            self.remove(*matched)