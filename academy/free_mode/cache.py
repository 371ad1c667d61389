"""Redis cache for the global free-mode settings.

Key schema
----------
settings:free_mode     String (JSON)   TTL=free_mode_cache_ttl_secs

Every course-access check reads free mode, so the singleton row is cached
and rewritten on every admin save. All functions are best-effort;
callers catch exceptions.
"""

from __future__ import annotations

import json
from datetime import datetime

from redis.asyncio import Redis

from academy.payments.gate import FreeModeWindow

FREE_MODE_KEY = "settings:free_mode"


def _encode(window: FreeModeWindow) -> str:
    return json.dumps({
        "is_enabled": window.is_enabled,
        "start_at": window.start_at.isoformat() if window.start_at else None,
        "end_at": window.end_at.isoformat() if window.end_at else None,
    })


def _decode(raw: str) -> FreeModeWindow:
    data = json.loads(raw)
    return FreeModeWindow(
        is_enabled=bool(data.get("is_enabled")),
        start_at=datetime.fromisoformat(data["start_at"]) if data.get("start_at") else None,
        end_at=datetime.fromisoformat(data["end_at"]) if data.get("end_at") else None,
    )


async def get_cached_window(redis: Redis) -> FreeModeWindow | None:
    raw = await redis.get(FREE_MODE_KEY)
    return _decode(raw) if raw else None


async def set_cached_window(
    window: FreeModeWindow, ttl_secs: int, redis: Redis, *, only_if_missing: bool = False,
) -> None:
    """``only_if_missing`` is for read-through fills; admin saves always overwrite."""
    await redis.set(FREE_MODE_KEY, _encode(window), ex=ttl_secs, nx=only_if_missing)
