from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

import redis

from jokenpo.config import settings_from_env
from jokenpo.infra.redis_client import shared_redis
from jokenpo.session_store import SessionRegistry


def get_redis() -> Generator[redis.Redis, None, None]:
    # Sessions hold on to the client for their presentation stream, so it is never closed here.
    yield shared_redis()


@lru_cache(maxsize=1)
def _default_registry() -> SessionRegistry:
    return SessionRegistry(settings=settings_from_env())


def get_registry() -> SessionRegistry:
    return _default_registry()
