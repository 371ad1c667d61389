import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, SmallInteger, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from .enums import VideoType, video_type_enum


class CourseVideo(Base):
    __tablename__ = "course_videos"

    video_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # Original URL as entered by the admin; embed URLs are derived on read
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    video_type: Mapped[VideoType] = mapped_column(
        video_type_enum, nullable=False, default=VideoType.URL
    )
    duration_mins: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sort_order: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    course = relationship("Course", back_populates="videos", lazy="noload")

    __table_args__ = (Index("ix_course_videos_course_id", "course_id"),)
