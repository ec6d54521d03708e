"""Tests for the dict-backed store used as a test double."""

from __future__ import annotations

import pytest

from kvgate.core.exceptions import BackendError
from kvgate.core.protocols import IKeyValueStore
from kvgate.persistence.memory_backend import MemoryKeyValueStore


@pytest.fixture
def mem():
    return MemoryKeyValueStore()


def test_satisfies_protocol(mem):
    assert isinstance(mem, IKeyValueStore)


def test_zrange_mimics_redis_indexes(mem):
    mem.zadd("z", {"a": 1, "b": 2, "c": 3})
    assert mem.zrange("z", 0, -1) == ["a", "b", "c"]
    assert mem.zrange("z", -2, -1) == ["b", "c"]
    assert mem.zrange("z", 1, 100) == ["b", "c"]
    assert mem.zrange("z", 2, 1) == []


def test_zrange_withscores_is_flat(mem):
    mem.zadd("z", {"a": 1, "b": 2.5})
    assert mem.zrange("z", 0, -1, withscores=True) == ["a", "1", "b", "2.5"]


def test_empty_member_list_is_rejected(mem):
    with pytest.raises(BackendError, match="wrong number of arguments"):
        mem.sadd("s", [])


def test_wrong_type(mem):
    mem.sadd("s", ["a"])
    with pytest.raises(BackendError, match="WRONGTYPE"):
        mem.get("s")


def test_emptied_hash_is_removed(mem):
    mem.hset("h", "f", "v")
    mem.hdel("h", ["f"])
    assert mem.keys("*") == []


def test_large_scores_use_exponent_form(mem):
    mem.zadd("z", {"big": 1e20})
    assert mem.zrange("z", 0, -1, withscores=True) == ["big", "1e+20"]
