"""Initial academy schema: catalog, videos, learning, payments, free mode.

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "a0b1c2d3e4f5"
down_revision = None
branch_labels = None
depends_on = None

PAYMENT_STATUS = ("pending", "awaiting_verification", "approved", "rejected")
PAYMENT_TYPE = ("course", "certificate")
VIDEO_TYPE = ("youtube", "vimeo", "url")
CERTIFICATE_REQUEST_STATUS = ("pending", "approved", "rejected", "sent")


def _now() -> sa.TextClause:
    return sa.text("now()")


def upgrade() -> None:
    # ── journeys ─────────────────────────────────────────────────────────
    op.create_table(
        "journeys",
        sa.Column("journey_id", sa.Uuid(), primary_key=True),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("sort_order", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
    )
    op.create_index("ix_journeys_sort_order", "journeys", ["sort_order"])

    # ── courses ──────────────────────────────────────────────────────────
    op.create_table(
        "courses",
        sa.Column("course_id", sa.Uuid(), primary_key=True),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("subtitle", sa.String(300), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("instructor_name", sa.String(200), nullable=True),
        sa.Column("thumbnail_url", sa.String(500), nullable=True),
        sa.Column(
            "journey_id",
            sa.Uuid(),
            sa.ForeignKey("journeys.journey_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("sort_order", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("is_finished", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("payment_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("enrollment_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
    )
    op.create_index("ix_courses_journey_id", "courses", ["journey_id"])
    op.create_index("ix_courses_created_at", "courses", ["created_at"])

    # ── course_videos ────────────────────────────────────────────────────
    op.create_table(
        "course_videos",
        sa.Column("video_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "course_id",
            sa.Uuid(),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column(
            "video_type",
            sa.Enum(*VIDEO_TYPE, name="video_type"),
            nullable=False,
            server_default="url",
        ),
        sa.Column("duration_mins", sa.Integer(), nullable=True),
        sa.Column("sort_order", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
    )
    op.create_index("ix_course_videos_course_id", "course_videos", ["course_id"])

    # ── enrollments / video_progress ─────────────────────────────────────
    op.create_table(
        "enrollments",
        sa.Column("enrollment_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "course_id",
            sa.Uuid(),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("progress_pct", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
    )
    op.create_index("ix_enrollments_user_id", "enrollments", ["user_id"])
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])

    op.create_table(
        "video_progress",
        sa.Column("progress_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "enrollment_id",
            sa.Uuid(),
            sa.ForeignKey("enrollments.enrollment_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "video_id",
            sa.Uuid(),
            sa.ForeignKey("course_videos.video_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.UniqueConstraint(
            "enrollment_id", "video_id", name="uq_video_progress_enrollment_video",
        ),
    )
    op.create_index("ix_video_progress_enrollment_id", "video_progress", ["enrollment_id"])

    # ── payment_orders ───────────────────────────────────────────────────
    op.create_table(
        "payment_orders",
        sa.Column("order_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=False, server_default=""),
        sa.Column("user_name", sa.String(200), nullable=False),
        sa.Column(
            "course_id",
            sa.Uuid(),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("course_title", sa.String(300), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="AOA"),
        sa.Column(
            "payment_type",
            sa.Enum(*PAYMENT_TYPE, name="payment_type"),
            nullable=False,
            server_default="course",
        ),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUS, name="payment_status"),
            nullable=False,
            server_default="awaiting_verification",
        ),
        sa.Column("approved_by", sa.Uuid(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_by", sa.Uuid(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
    )
    op.create_index("ix_payment_orders_user_course", "payment_orders", ["user_id", "course_id"])
    op.create_index("ix_payment_orders_status", "payment_orders", ["status"])
    op.create_index("ix_payment_orders_created_at", "payment_orders", ["created_at"])

    # ── free_mode_settings (singleton) ───────────────────────────────────
    op.create_table(
        "free_mode_settings",
        sa.Column("settings_id", sa.SmallInteger(), primary_key=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.CheckConstraint("settings_id = 1", name="ck_free_mode_singleton"),
    )

    # ── course_ratings ───────────────────────────────────────────────────
    op.create_table(
        "course_ratings",
        sa.Column("rating_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "course_id",
            sa.Uuid(),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("user_name", sa.String(200), nullable=False),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.UniqueConstraint("course_id", "user_id", name="uq_course_ratings_course_user"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_course_ratings_range"),
    )
    op.create_index("ix_course_ratings_course_id", "course_ratings", ["course_id"])

    # ── certificate_requests ─────────────────────────────────────────────
    op.create_table(
        "certificate_requests",
        sa.Column("request_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "course_id",
            sa.Uuid(),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, server_default=""),
        sa.Column("course_title", sa.String(300), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*CERTIFICATE_REQUEST_STATUS, name="certificate_request_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=_now()),
        sa.UniqueConstraint(
            "user_id", "course_id", name="uq_certificate_requests_user_course",
        ),
    )
    op.create_index("ix_certificate_requests_status", "certificate_requests", ["status"])


def downgrade() -> None:
    op.drop_table("certificate_requests")
    op.drop_table("course_ratings")
    op.drop_table("free_mode_settings")
    op.drop_table("payment_orders")
    op.drop_table("video_progress")
    op.drop_table("enrollments")
    op.drop_table("course_videos")
    op.drop_table("courses")
    op.drop_table("journeys")

    for enum_name in (
        "certificate_request_status",
        "payment_status",
        "payment_type",
        "video_type",
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
