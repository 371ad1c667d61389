import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base


class Course(Base):
    __tablename__ = "courses"

    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(300), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Denormalized so course cards render without a call to the identity provider
    instructor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    journey_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("journeys.journey_id", ondelete="SET NULL"),
        nullable=True,
    )
    sort_order: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    # Production state: all lessons recorded vs. still being published
    is_finished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Payment settings
    payment_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    enrollment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    journey = relationship("Journey", back_populates="courses", lazy="noload")
    videos = relationship(
        "CourseVideo",
        back_populates="course",
        lazy="noload",
        order_by="CourseVideo.sort_order",
    )
    enrollments = relationship("Enrollment", back_populates="course", lazy="noload")

    __table_args__ = (
        Index("ix_courses_journey_id", "journey_id"),
        Index("ix_courses_created_at", "created_at"),
    )
