"""create melimou schema

Revision ID: 0f1a2b3c4d5e
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0f1a2b3c4d5e"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create every melimou_ table, including the one-active-subscription partial index."""
    op.create_table(
        "melimou_user",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("email_verified", sa.DateTime(timezone=True), nullable=True),
        sa.Column("image", sa.String(length=500), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="student"),
        sa.Column("formality_preference", sa.String(length=20), nullable=True, server_default="mixed"),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(length=30), nullable=True),
        sa.Column("has_completed_onboarding", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("greek_level", sa.String(length=30), nullable=True),
        sa.Column("learning_goals", sa.JSON(), nullable=True),
        sa.Column("study_time_per_week", sa.Integer(), nullable=True),
        sa.Column("previous_experience", sa.Text(), nullable=True),
        sa.Column("interests", sa.JSON(), nullable=True),
        sa.Column("how_heard_about_us", sa.String(length=255), nullable=True),
        sa.Column("wants_practice_test", sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column("subscription_tier", sa.String(length=20), nullable=False, server_default="free"),
        sa.Column("subscription_status", sa.String(length=20), nullable=True, server_default="active"),
        sa.Column("subscription_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("subscription_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("stripe_customer_id", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_user_email"), "melimou_user", ["email"], unique=True)

    op.create_table(
        "melimou_subscription_plan",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("interval_type", sa.String(length=10), nullable=False),
        sa.Column("interval_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("stripe_price_id", sa.String(length=255), nullable=True),
        sa.Column("features", sa.JSON(), nullable=True),
        sa.Column("max_sessions", sa.Integer(), nullable=True, server_default="-1"),
        sa.Column("max_resources", sa.Integer(), nullable=True, server_default="-1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "melimou_user_subscription",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("plan_id", sa.Integer(), nullable=False),
        sa.Column("stripe_subscription_id", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("current_period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["melimou_user.id"]),
        sa.ForeignKeyConstraint(["plan_id"], ["melimou_subscription_plan.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_user_subscription_user_id"), "melimou_user_subscription", ["user_id"])
    op.create_index(
        "uq_melimou_user_subscription_one_active",
        "melimou_user_subscription",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
    )

    op.create_table(
        "melimou_onboarding_response",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("question_key", sa.String(length=100), nullable=False),
        sa.Column("response", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["melimou_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_onboarding_response_user_id"), "melimou_onboarding_response", ["user_id"])

    op.create_table(
        "melimou_learning_path",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(length=20), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("required_subscription_tier", sa.String(length=20), nullable=False, server_default="free"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "melimou_module",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("learning_path_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["learning_path_id"], ["melimou_learning_path.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_module_learning_path_id"), "melimou_module", ["learning_path_id"])

    op.create_table(
        "melimou_lesson",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("module_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=True),
        sa.Column("required_subscription_tier", sa.String(length=20), nullable=False, server_default="free"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["module_id"], ["melimou_module.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_lesson_module_id"), "melimou_lesson", ["module_id"])

    op.create_table(
        "melimou_user_progress",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("lesson_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="not_started"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("time_spent", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["melimou_user.id"]),
        sa.ForeignKeyConstraint(["lesson_id"], ["melimou_lesson.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "lesson_id", name="uq_melimou_user_progress_user_lesson"),
    )
    op.create_index(op.f("ix_melimou_user_progress_user_id"), "melimou_user_progress", ["user_id"])

    op.create_table(
        "melimou_cohort",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "melimou_cohort_member",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cohort_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="member"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["cohort_id"], ["melimou_cohort.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["melimou_user.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cohort_id", "user_id", name="uq_melimou_cohort_member_cohort_user"),
    )
    op.create_index(op.f("ix_melimou_cohort_member_cohort_id"), "melimou_cohort_member", ["cohort_id"])
    op.create_index(op.f("ix_melimou_cohort_member_user_id"), "melimou_cohort_member", ["user_id"])

    op.create_table(
        "melimou_message",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("cohort_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("message_type", sa.String(length=20), nullable=False, server_default="chat"),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["melimou_user.id"]),
        sa.ForeignKeyConstraint(["cohort_id"], ["melimou_cohort.id"]),
        sa.ForeignKeyConstraint(["parent_id"], ["melimou_message.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_message_user_id"), "melimou_message", ["user_id"])
    op.create_index(op.f("ix_melimou_message_cohort_id"), "melimou_message", ["cohort_id"])

    op.create_table(
        "melimou_resource",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("url", sa.String(length=1000), nullable=False),
        sa.Column("difficulty", sa.String(length=20), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("required_subscription_tier", sa.String(length=20), nullable=False, server_default="free"),
        sa.Column("uploaded_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["uploaded_by"], ["melimou_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_resource_uploaded_by"), "melimou_resource", ["uploaded_by"])

    op.create_table(
        "melimou_alert",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="info"),
        sa.Column("target_user_id", sa.String(length=36), nullable=True),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["target_user_id"], ["melimou_user.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["melimou_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_alert_target_user_id"), "melimou_alert", ["target_user_id"])

    op.create_table(
        "melimou_tutor_session",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("topic", sa.String(length=255), nullable=True),
        sa.Column("formality_level", sa.String(length=20), nullable=False, server_default="mixed"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("messages_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["melimou_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_tutor_session_user_id"), "melimou_tutor_session", ["user_id"])

    op.create_table(
        "melimou_tutor_message",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("feedback", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["session_id"], ["melimou_tutor_session.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_melimou_tutor_message_session_id"), "melimou_tutor_message", ["session_id"])


def downgrade() -> None:
    """Drop every melimou_ table."""
    for table in (
        "melimou_tutor_message",
        "melimou_tutor_session",
        "melimou_alert",
        "melimou_resource",
        "melimou_message",
        "melimou_cohort_member",
        "melimou_cohort",
        "melimou_user_progress",
        "melimou_lesson",
        "melimou_module",
        "melimou_learning_path",
        "melimou_onboarding_response",
        "melimou_user_subscription",
        "melimou_subscription_plan",
        "melimou_user",
    ):
        op.drop_table(table)
