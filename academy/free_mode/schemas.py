"""Free-mode Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UpdateFreeModeRequest(BaseModel):
    is_enabled: bool = Field(description="Make every course free during the window.")
    start_at: datetime | None = Field(
        default=None, description="Window start (ISO 8601). Required when enabling.",
    )
    end_at: datetime | None = Field(
        default=None, description="Window end (ISO 8601). Must be after start_at.",
    )


class FreeModeSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_enabled: bool = False
    start_at: datetime | None = None
    end_at: datetime | None = None
    updated_by: UUID | None = None
    updated_at: datetime | None = None


class FreeModeStatusResponse(BaseModel):
    """Landing-page banner state."""

    is_enabled: bool
    is_active: bool
    is_finished: bool
    countdown_target: datetime | None = Field(
        default=None,
        description="end_at while active, start_at before the window opens.",
    )
    seconds_left: int | None = None
