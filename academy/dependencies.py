"""
Academy service — FastAPI dependencies.

Re-exports the shared auth guards so routers import from one place, and
exposes settings and the (optional) Redis client.
"""
from functools import lru_cache

from fastapi import Request
from redis.asyncio import Redis

from academy.config import Settings
from shared.auth import (
    get_current_user_optional,
    get_current_user_required,
    require_admin,
)

get_current_user = get_current_user_required
get_optional_user = get_current_user_optional


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_redis(request: Request) -> Redis | None:
    """Redis client created in the app lifespan; ``None`` when Redis is disabled."""
    return getattr(request.app.state, "redis", None)


__all__ = [
    "get_current_user",
    "get_optional_user",
    "get_redis",
    "get_settings",
    "require_admin",
]
