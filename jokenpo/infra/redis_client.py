from __future__ import annotations

import os
from functools import lru_cache

import redis

# Presentation streams are best-effort; don't let a missing server stall a round.
SOCKET_TIMEOUT_S = 0.5


def get_redis_url() -> str:
    return os.environ.get("REDIS_URL", "redis://localhost:6379/0")


def create_redis(url: str | None = None) -> redis.Redis:
    return redis.Redis.from_url(
        url or get_redis_url(),
        decode_responses=True,
        socket_timeout=SOCKET_TIMEOUT_S,
        socket_connect_timeout=SOCKET_TIMEOUT_S,
    )


@lru_cache(maxsize=1)
def shared_redis() -> redis.Redis:
    """Process-wide client; sessions keep writing to it after the request that created them."""

    return create_redis()
