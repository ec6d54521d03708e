"""Redis store implementing IKeyValueStore."""

from __future__ import annotations

import logging
from typing import Any, Callable

import redis
from redis.backoff import ExponentialBackoff, NoBackoff
from redis.exceptions import RedisError
from redis.retry import Retry

from kvgate.core.exceptions import BackendError, BackendUnavailableError
from kvgate.core.types import JsonValue, ScoredReply

logger = logging.getLogger(__name__)


class RedisKeyValueStore:
    """Production IKeyValueStore backed by a single Redis connection."""

    def __init__(
        self,
        url: str = "redis://localhost:6379",
        *,
        max_retries: int = 5,
        min_retry_delay: float = 1.0,
        max_retry_delay: float = 30.0,
        decode_responses: bool = True,
        socket_timeout: float | None = None,
    ) -> None:
        self._url = url
        self._max_retries = max_retries
        self._backoff = ExponentialBackoff(cap=max_retry_delay, base=min_retry_delay)
        self._retry = Retry(self._backoff, max_retries)
        # Reconnection policy is installed only after the startup ping succeeds.
        self._client = redis.Redis.from_url(
            url,
            decode_responses=decode_responses,
            socket_timeout=socket_timeout,
            retry=Retry(NoBackoff(), 0),
        )

    @property
    def url(self) -> str:
        return self._url

    def connect(self) -> None:
        """Ping Redis under the retry policy, then enable it for runtime reconnects.

        Raises:
            BackendUnavailableError: every attempt failed.
        """
        attempts = 0

        def _on_failure(error: Exception) -> None:
            nonlocal attempts
            attempts += 1
            if attempts <= self._max_retries:
                delay = self._backoff.compute(attempts)
                logger.warning(
                    "Redis attempt %d/%d failed (%s): %s; next attempt in %.1fs",
                    attempts, self._max_retries, self._url, error, delay,
                )
            else:
                logger.error(
                    "Redis maximum retries (%d) reached for %s: %s",
                    self._max_retries, self._url, error,
                )

        try:
            self._retry.call_with_retry(self._client.ping, _on_failure)
        except RedisError as exc:
            raise BackendUnavailableError(self._url, max(attempts, 1), str(exc)) from exc

        self._client.set_retry(self._retry)
        logger.info("Connected to Redis at %s", self._url)

    def _run(self, command: str, key: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except RedisError as exc:
            raise BackendError(f"Redis {command} failed for key={key!r}: {exc}") from exc

    def ping(self) -> None:
        self._run("PING", "", self._client.ping)

    def close(self) -> None:
        try:
            self._client.close()
        except RedisError as exc:
            logger.warning("Error closing Redis connection: %s", exc)

    # ---- strings / keyspace ----

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        self._run("SET", key, self._client.set, key, value, ex=expire_seconds)

    def get(self, key: str) -> str | None:
        return self._run("GET", key, self._client.get, key)

    def delete(self, keys: list[str]) -> int:
        return self._run("DEL", ",".join(keys), self._client.delete, *keys)

    def keys(self, pattern: str) -> list[str]:
        return list(self._run("KEYS", pattern, self._client.keys, pattern))

    def expire(self, key: str, seconds: int) -> bool:
        return bool(self._run("EXPIRE", key, self._client.expire, key, seconds))

    # ---- hashes ----

    def hset(self, key: str, field: str, value: str) -> int:
        return self._run("HSET", key, self._client.hset, key, field, value)

    def hget(self, key: str, field: str) -> str | None:
        return self._run("HGET", key, self._client.hget, key, field)

    def hgetall(self, key: str) -> dict[str, str]:
        return self._run("HGETALL", key, self._client.hgetall, key)

    def hdel(self, key: str, fields: list[str]) -> int:
        return self._run("HDEL", key, self._client.hdel, key, *fields)

    # ---- sets ----

    def sadd(self, key: str, members: list[str]) -> int:
        return self._run("SADD", key, self._client.sadd, key, *members)

    def srem(self, key: str, members: list[str]) -> int:
        return self._run("SREM", key, self._client.srem, key, *members)

    def smembers(self, key: str) -> list[str]:
        return list(self._run("SMEMBERS", key, self._client.smembers, key))

    # ---- sorted sets ----

    def zadd(self, key: str, scores: dict[str, float]) -> int:
        return self._run("ZADD", key, self._client.zadd, key, scores)

    def zrange(
        self, key: str, start: int, stop: int, withscores: bool = False
    ) -> list[str] | ScoredReply:
        return self._run(
            "ZRANGE", key, self._client.zrange, key, start, stop, withscores=withscores,
        )

    def zrem(self, key: str, members: list[str]) -> int:
        return self._run("ZREM", key, self._client.zrem, key, *members)

    # ---- JSON documents ----

    def json_set(self, key: str, value: JsonValue) -> None:
        self._run("JSON.SET", key, self._client.json().set, key, "$", value)

    def json_get(self, key: str) -> JsonValue | None:
        return self._run("JSON.GET", key, self._client.json().get, key)
