from dataclasses import dataclass
from datetime import timedelta
from fnmatch import fnmatchcase

import pytest
import redis

from shopapi.cache import CacheMiss, RedisCache, RedisConfig


class FakeRedis:
    def __init__(self, alive=True):
        self.alive = alive
        self.data = {}
        self.expiry = {}

    def ping(self):
        if not self.alive:
            raise redis.exceptions.ConnectionError("down")
        return True

    def get(self, name):
        return self.data.get(name)

    def set(self, name, value, ex=None):
        self.data[name] = value.encode() if isinstance(value, str) else value
        self.expiry[name] = ex
        return True

    def delete(self, *names):
        removed = [name for name in names if name in self.data]
        for name in removed:
            del self.data[name]
        return len(removed)

    def keys(self, pattern):
        return [name.encode() for name in self.data if fnmatchcase(name, pattern)]


@pytest.fixture
def fake():
    return FakeRedis()


@pytest.fixture
def cache(fake):
    return RedisCache(RedisConfig(), fake)


@dataclass
class _Product:
    name: str
    price: float


def test_round_trip(cache):
    cache.set("k", {"name": "p", "tags": ["a", "b"], "price": 1.5})
    assert cache.get("k") == {"name": "p", "tags": ["a", "b"], "price": 1.5}


def test_dataclass_values_are_stored_as_json(cache, fake):
    cache.set("product", _Product(name="p", price=1.0))
    assert cache.get("product") == {"name": "p", "price": 1.0}
    assert fake.expiry["product"] is None


def test_missing_key_raises_cache_miss(cache):
    with pytest.raises(CacheMiss):
        cache.get("absent")


def test_set_with_expiration(cache, fake):
    cache.set_with_expiration("k", 1, timedelta(minutes=1))
    assert fake.expiry["k"] == timedelta(minutes=1)

    cache.set_with_expiration("z", 1, 0)
    assert fake.expiry["z"] is None


def test_keys_and_remove_pattern(cache):
    for key in ("product:1", "product:2", "user:1"):
        cache.set(key, key)

    assert sorted(cache.keys("product:*")) == ["product:1", "product:2"]

    cache.remove_pattern("product:*")
    assert cache.keys("*") == ["user:1"]

    cache.remove_pattern("nothing:*")
    assert cache.keys("*") == ["user:1"]


def test_remove(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    cache.remove("a", "b")
    with pytest.raises(CacheMiss):
        cache.get("a")


def test_is_connected_follows_ping(cache, fake):
    assert cache.is_connected() is True
    fake.alive = False
    assert cache.is_connected() is False


def test_unreachable_server_raises():
    with pytest.raises(ConnectionError):
        RedisCache(RedisConfig(), FakeRedis(alive=False))