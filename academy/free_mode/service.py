"""Free-mode service — the global "everything is free" time window.

Pure business logic, no FastAPI imports.
Redis is passed as ``Redis | None`` and all Redis ops are best-effort.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.exceptions import InvalidFreeModeWindowError
from academy.free_mode import cache as free_mode_cache
from academy.models.free_mode import FREE_MODE_ROW_ID, FreeModeSettings
from academy.payments.gate import FreeModeWindow, ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECS = 60


def _to_window(row: FreeModeSettings | None) -> FreeModeWindow:
    if row is None:
        return FreeModeWindow()
    return FreeModeWindow(
        is_enabled=row.is_enabled,
        start_at=ensure_utc(row.start_at) if row.start_at else None,
        end_at=ensure_utc(row.end_at) if row.end_at else None,
    )


async def get_settings_row(db: AsyncSession) -> FreeModeSettings | None:
    return await db.get(FreeModeSettings, FREE_MODE_ROW_ID)


async def get_window(
    db: AsyncSession,
    redis: Redis | None = None,
    *,
    cache_ttl_secs: int = DEFAULT_CACHE_TTL_SECS,
) -> FreeModeWindow:
    """Current free-mode window, served from Redis when warm."""
    if redis is not None:
        try:
            cached = await free_mode_cache.get_cached_window(redis)
            if cached is not None:
                return cached
        except Exception as exc:
            logger.warning("Free-mode cache read failed: %s", exc)

    window = _to_window(await get_settings_row(db))

    if redis is not None:
        try:
            await free_mode_cache.set_cached_window(
                window, cache_ttl_secs, redis, only_if_missing=True,
            )
        except Exception as exc:
            logger.warning("Free-mode cache write failed: %s", exc)
    return window


def validate_window(
    is_enabled: bool, start_at: datetime | None, end_at: datetime | None,
) -> None:
    """Enabling requires both bounds and ``end_at > start_at``."""
    if not is_enabled:
        return
    if start_at is None or end_at is None:
        raise InvalidFreeModeWindowError(
            "Please set both a start and an end date to enable free mode."
        )
    if ensure_utc(end_at) <= ensure_utc(start_at):
        raise InvalidFreeModeWindowError("The end date must be after the start date.")


async def update_settings(
    db: AsyncSession,
    admin_id: UUID,
    *,
    is_enabled: bool,
    start_at: datetime | None,
    end_at: datetime | None,
    redis: Redis | None = None,
    cache_ttl_secs: int = DEFAULT_CACHE_TTL_SECS,
) -> FreeModeSettings:
    """Save the window and write it through to the cache.

    Commits before writing Redis. Read-through fills never overwrite an
    existing key, so a reader still holding the previous row cannot
    re-cache it after this save.
    """
    validate_window(is_enabled, start_at, end_at)

    row = await get_settings_row(db)
    if row is None:
        row = FreeModeSettings(settings_id=FREE_MODE_ROW_ID)
        db.add(row)
    row.is_enabled = is_enabled
    row.start_at = ensure_utc(start_at) if start_at else None
    row.end_at = ensure_utc(end_at) if end_at else None
    row.updated_by = admin_id
    row.updated_at = datetime.now(timezone.utc)
    await db.commit()

    if redis is not None:
        try:
            await free_mode_cache.set_cached_window(_to_window(row), cache_ttl_secs, redis)
        except Exception as exc:
            logger.warning("Free-mode cache write failed: %s", exc)

    logger.info(
        "Free mode %s by %s (window %s → %s)",
        "enabled" if is_enabled else "disabled", admin_id, start_at, end_at,
    )
    return row


def describe_window(window: FreeModeWindow, now: datetime) -> dict:
    """Public banner state: whether free mode is on and what the countdown targets.

    While active the countdown runs to ``end_at``; before the window opens it
    runs to ``start_at``. Once the window has passed there is no countdown.
    """
    active = window.is_active(now)
    finished = window.is_finished(now)
    target: datetime | None = None
    if window.is_enabled and not finished:
        target = window.end_at if active else window.start_at

    seconds_left: int | None = None
    if target is not None:
        seconds_left = max(int((ensure_utc(target) - ensure_utc(now)).total_seconds()), 0)

    return {
        "is_enabled": window.is_enabled,
        "is_active": active,
        "is_finished": finished,
        "countdown_target": target,
        "seconds_left": seconds_left,
    }
