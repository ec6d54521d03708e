"""Protocol interfaces for kvgate abstractions.

The gateway talks to its backend only through these Protocols: structural
typing, no inheritance required, easy to swap for an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from kvgate.core.types import JsonValue, ScoredReply


# ---------------------------------------------------------------------------
# Persistence: Key-value store
# ---------------------------------------------------------------------------

@runtime_checkable
class IKeyValueStore(Protocol):
    """Redis-compatible command surface exposed through the gateway.

    Every method is a single backend command. Failures raise ``BackendError``.
    """

    def ping(self) -> None: ...

    def close(self) -> None: ...

    # strings / keyspace
    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None: ...

    def get(self, key: str) -> str | None: ...

    def delete(self, keys: list[str]) -> int: ...

    def keys(self, pattern: str) -> list[str]: ...

    def expire(self, key: str, seconds: int) -> bool: ...

    # hashes
    def hset(self, key: str, field: str, value: str) -> int: ...

    def hget(self, key: str, field: str) -> str | None: ...

    def hgetall(self, key: str) -> dict[str, str]: ...

    def hdel(self, key: str, fields: list[str]) -> int: ...

    # sets
    def sadd(self, key: str, members: list[str]) -> int: ...

    def srem(self, key: str, members: list[str]) -> int: ...

    def smembers(self, key: str) -> list[str]: ...

    # sorted sets
    def zadd(self, key: str, scores: dict[str, float]) -> int: ...

    def zrange(
        self, key: str, start: int, stop: int, withscores: bool = False
    ) -> list[str] | ScoredReply: ...

    def zrem(self, key: str, members: list[str]) -> int: ...

    # JSON documents
    def json_set(self, key: str, value: JsonValue) -> None: ...

    def json_get(self, key: str) -> JsonValue | None: ...
