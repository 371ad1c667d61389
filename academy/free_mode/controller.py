"""Free-mode controller — maps service results to HTTP responses."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.exceptions import InvalidFreeModeWindowError
from academy.free_mode import service
from academy.free_mode.schemas import (
    FreeModeSettingsResponse,
    FreeModeStatusResponse,
    UpdateFreeModeRequest,
)

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidFreeModeWindowError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.exception("Unexpected free-mode error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def get_status(
    db: AsyncSession, settings: Settings, redis: Redis | None,
) -> FreeModeStatusResponse:
    window = await service.get_window(
        db, redis, cache_ttl_secs=settings.free_mode_cache_ttl_secs,
    )
    return FreeModeStatusResponse(
        **service.describe_window(window, datetime.now(timezone.utc)),
    )


async def get_settings(db: AsyncSession) -> FreeModeSettingsResponse:
    row = await service.get_settings_row(db)
    if row is None:
        return FreeModeSettingsResponse()
    return FreeModeSettingsResponse.model_validate(row)


async def update_settings(
    db: AsyncSession,
    admin_id: UUID,
    body: UpdateFreeModeRequest,
    redis: Redis | None,
    settings: Settings,
) -> FreeModeSettingsResponse:
    try:
        row = await service.update_settings(
            db,
            admin_id,
            is_enabled=body.is_enabled,
            start_at=body.start_at,
            end_at=body.end_at,
            redis=redis,
            cache_ttl_secs=settings.free_mode_cache_ttl_secs,
        )
        return FreeModeSettingsResponse.model_validate(row)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
