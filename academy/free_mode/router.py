"""Free-mode router — public banner status and admin configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.database import get_db
from academy.dependencies import get_redis, get_settings, require_admin
from academy.free_mode import controller
from academy.free_mode.schemas import (
    FreeModeSettingsResponse,
    FreeModeStatusResponse,
    UpdateFreeModeRequest,
)
from shared.models.user import CurrentUser

router = APIRouter(tags=["Free Mode"])


@router.get(
    "/free-mode",
    response_model=FreeModeStatusResponse,
    summary="Free-mode banner status",
    description="Whether free mode is on, active right now, or finished, "
    "plus the countdown target. Clients poll this every 60 seconds.",
)
async def get_free_mode_status(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    redis: Redis | None = Depends(get_redis),
) -> FreeModeStatusResponse:
    return await controller.get_status(db, settings, redis)


@router.get(
    "/admin/free-mode",
    response_model=FreeModeSettingsResponse,
    summary="[Admin] Get free-mode settings",
)
async def get_free_mode_settings(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> FreeModeSettingsResponse:
    return await controller.get_settings(db)


@router.put(
    "/admin/free-mode",
    response_model=FreeModeSettingsResponse,
    summary="[Admin] Configure the free-mode window",
    description="When enabled, ALL courses are free between start_at and end_at. "
    "Enabling requires both bounds and end_at after start_at.",
)
async def update_free_mode_settings(
    body: UpdateFreeModeRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
    redis: Redis | None = Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> FreeModeSettingsResponse:
    return await controller.update_settings(db, admin.id, body, redis, settings)
