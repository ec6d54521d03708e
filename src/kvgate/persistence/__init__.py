"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from kvgate.core.config import AppSettings
from kvgate.persistence.redis_backend import RedisKeyValueStore


def create_store(settings: AppSettings | None = None, url: str | None = None) -> RedisKeyValueStore:
    """Create the Redis store from application settings.

    Args:
        settings: Application settings; defaults are loaded from the environment.
        url: Connection URL overriding ``settings.redis.url`` (command-line value).

    Returns:
        An unconnected store; call ``connect()`` before dispatching commands.
    """
    if settings is None:
        settings = AppSettings()

    return RedisKeyValueStore(
        url or settings.redis.url,
        max_retries=settings.redis.max_retries,
        min_retry_delay=settings.redis.min_retry_delay,
        max_retry_delay=settings.redis.max_retry_delay,
        decode_responses=settings.redis.decode_responses,
        socket_timeout=settings.redis.socket_timeout,
    )
