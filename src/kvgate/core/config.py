"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class RedisConfig(BaseSettings):
    """Redis connection and reconnection policy."""

    model_config = {"env_prefix": "KVGATE_REDIS_"}

    url: str = "redis://localhost:6379"
    max_retries: int = 5
    min_retry_delay: float = 1.0  # seconds, doubled per attempt
    max_retry_delay: float = 30.0
    decode_responses: bool = True
    socket_timeout: float | None = None


class ServerConfig(BaseSettings):
    """Identity advertised to MCP hosts."""

    model_config = {"env_prefix": "KVGATE_SERVER_"}

    name: str = "redis-extended"
    version: str = "1.0.0"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "KVGATE_"}

    log_level: str = "INFO"

    redis: RedisConfig = RedisConfig()
    server: ServerConfig = ServerConfig()
