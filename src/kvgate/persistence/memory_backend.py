"""In-memory store for unit tests: dict-backed fake of the Redis command surface."""

from __future__ import annotations

import copy
from fnmatch import fnmatchcase
from typing import Any

from kvgate.core.exceptions import BackendError
from kvgate.core.types import JsonValue

_WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


def _score_text(score: float) -> str:
    """Format a score the way Redis replies with it."""
    return f"{float(score):.17g}"


class MemoryKeyValueStore:
    """Dict-backed IKeyValueStore for unit tests.

    Sorted-set WITHSCORES replies come back as a flat ``[member, score, ...]``
    list of strings, as a raw Redis reply would. TTLs are recorded but never
    enforced.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, Any]] = {}
        self.expirations: dict[str, int] = {}
        self.calls: list[str] = []
        self.fail_on: dict[str, str] = {}
        self.closed = False

    def _record(self, command: str) -> None:
        self.calls.append(command)
        if command in self.fail_on:
            raise BackendError(self.fail_on[command])

    def _typed(self, key: str, kind: str, default: Any = None) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return default
        if entry[0] != kind:
            raise BackendError(_WRONGTYPE)
        return entry[1]

    def _require_items(self, command: str, items: Any) -> None:
        if not items:
            raise BackendError(f"ERR wrong number of arguments for '{command.lower()}' command")

    def connect(self) -> None:
        self._record("PING")

    def ping(self) -> None:
        self._record("PING")

    def close(self) -> None:
        self.closed = True

    # ---- strings / keyspace ----

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        self._record("SET")
        self._data[key] = ("string", value)
        if expire_seconds:
            self.expirations[key] = expire_seconds
        else:
            self.expirations.pop(key, None)

    def get(self, key: str) -> str | None:
        self._record("GET")
        return self._typed(key, "string")

    def delete(self, keys: list[str]) -> int:
        self._record("DEL")
        self._require_items("DEL", keys)
        removed = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                removed += 1
            self.expirations.pop(key, None)
        return removed

    def keys(self, pattern: str) -> list[str]:
        self._record("KEYS")
        return [k for k in self._data if fnmatchcase(k, pattern)]

    def expire(self, key: str, seconds: int) -> bool:
        self._record("EXPIRE")
        if key not in self._data:
            return False
        self.expirations[key] = seconds
        return True

    # ---- hashes ----

    def hset(self, key: str, field: str, value: str) -> int:
        self._record("HSET")
        fields = self._typed(key, "hash", {})
        added = 0 if field in fields else 1
        fields[field] = value
        self._data[key] = ("hash", fields)
        return added

    def hget(self, key: str, field: str) -> str | None:
        self._record("HGET")
        return self._typed(key, "hash", {}).get(field)

    def hgetall(self, key: str) -> dict[str, str]:
        self._record("HGETALL")
        return dict(self._typed(key, "hash", {}))

    def hdel(self, key: str, fields: list[str]) -> int:
        self._record("HDEL")
        self._require_items("HDEL", fields)
        current = self._typed(key, "hash", {})
        removed = sum(1 for f in fields if current.pop(f, None) is not None)
        if not current:
            self._data.pop(key, None)
        return removed

    # ---- sets ----

    def sadd(self, key: str, members: list[str]) -> int:
        self._record("SADD")
        self._require_items("SADD", members)
        current = self._typed(key, "set", {})
        added = 0
        for member in members:
            if member not in current:
                current[member] = None
                added += 1
        self._data[key] = ("set", current)
        return added

    def srem(self, key: str, members: list[str]) -> int:
        self._record("SREM")
        self._require_items("SREM", members)
        current = self._typed(key, "set", {})
        removed = 0
        for member in members:
            if member in current:
                del current[member]
                removed += 1
        if not current:
            self._data.pop(key, None)
        return removed

    def smembers(self, key: str) -> list[str]:
        self._record("SMEMBERS")
        return list(self._typed(key, "set", {}))

    # ---- sorted sets ----

    def zadd(self, key: str, scores: dict[str, float]) -> int:
        self._record("ZADD")
        self._require_items("ZADD", scores)
        current = self._typed(key, "zset", {})
        added = sum(1 for m in scores if m not in current)
        current.update(scores)
        self._data[key] = ("zset", current)
        return added

    def zrange(self, key: str, start: int, stop: int, withscores: bool = False) -> list[str]:
        self._record("ZRANGE")
        ordered = sorted(self._typed(key, "zset", {}).items(), key=lambda kv: (kv[1], kv[0]))
        size = len(ordered)
        if start < 0:
            start = max(size + start, 0)
        if stop < 0:
            stop = size + stop
        if start > stop or start >= size:
            return []
        window = ordered[start:stop + 1]
        if not withscores:
            return [member for member, _ in window]
        flat: list[str] = []
        for member, score in window:
            flat.extend([member, _score_text(score)])
        return flat

    def zrem(self, key: str, members: list[str]) -> int:
        self._record("ZREM")
        self._require_items("ZREM", members)
        current = self._typed(key, "zset", {})
        removed = sum(1 for m in members if current.pop(m, None) is not None)
        if not current:
            self._data.pop(key, None)
        return removed

    # ---- JSON documents ----

    def json_set(self, key: str, value: JsonValue) -> None:
        self._record("JSON.SET")
        self._data[key] = ("json", copy.deepcopy(value))

    def json_get(self, key: str) -> JsonValue | None:
        self._record("JSON.GET")
        return copy.deepcopy(self._typed(key, "json"))
