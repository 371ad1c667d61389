"""Video playlist router — public playlist and admin video management."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.database import get_db
from academy.dependencies import get_optional_user, get_redis, get_settings, require_admin
from academy.videos import controller
from academy.videos.schemas import (
    AddVideoRequest,
    PlaylistResponse,
    ReorderVideosRequest,
    UpdateVideoRequest,
    VideoResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(tags=["Videos"])


@router.get(
    "/courses/{course_id}/videos",
    response_model=PlaylistResponse,
    summary="Course playlist",
    description="Ordered videos with embed URLs. URLs are withheld while the "
    "course is locked for the caller, unless they are already enrolled.",
)
async def get_playlist(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser | None = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
    redis: Redis | None = Depends(get_redis),
) -> PlaylistResponse:
    return await controller.get_playlist(
        db, course_id, user.id if user else None, settings, redis,
    )


@router.post(
    "/admin/courses/{course_id}/videos",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Add a video to the end of the playlist",
)
async def add_video(
    course_id: UUID,
    body: AddVideoRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> VideoResponse:
    return await controller.add_video(db, course_id, body)


@router.put(
    "/admin/courses/{course_id}/videos/reorder",
    response_model=list[VideoResponse],
    summary="[Admin] Reorder the playlist",
)
async def reorder_videos(
    course_id: UUID,
    body: ReorderVideosRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> list[VideoResponse]:
    return await controller.reorder_videos(db, course_id, body)


@router.patch(
    "/admin/courses/{course_id}/videos/{video_id}",
    response_model=VideoResponse,
    summary="[Admin] Update a video",
)
async def update_video(
    course_id: UUID,
    video_id: UUID,
    body: UpdateVideoRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> VideoResponse:
    return await controller.update_video(db, course_id, video_id, body)


@router.delete(
    "/admin/courses/{course_id}/videos/{video_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete a video",
)
async def delete_video(
    course_id: UUID,
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> None:
    await controller.delete_video(db, course_id, video_id)
