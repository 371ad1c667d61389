import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, SmallInteger, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base

# The free-mode record is a singleton row
FREE_MODE_ROW_ID = 1


class FreeModeSettings(Base):
    __tablename__ = "free_mode_settings"

    settings_id: Mapped[int] = mapped_column(
        SmallInteger, primary_key=True, default=FREE_MODE_ROW_ID
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(f"settings_id = {FREE_MODE_ROW_ID}", name="ck_free_mode_singleton"),
    )
