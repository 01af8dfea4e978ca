"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the event feed:
users, interests, user_interests, events, event_participants.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- interests ---
    op.create_table(
        "interests",
        sa.Column("interest_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("emoji", sa.String(16), nullable=True),
    )

    # --- user_interests ---
    op.create_table(
        "user_interests",
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("interest_id", sa.String(36), sa.ForeignKey("interests.interest_id"), primary_key=True),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("details", sa.Text, nullable=False, server_default=""),
        sa.Column("interest_id", sa.String(36), sa.ForeignKey("interests.interest_id"), nullable=False),
        sa.Column("location_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("location_address", sa.String(500), nullable=False, server_default=""),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("start_time_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("with_approval", sa.Boolean, nullable=False, server_default="0"),
        sa.Column("creator_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_interest_id", "events", ["interest_id"])
    op.create_index("ix_events_creator_id", "events", ["creator_id"])

    # --- event_participants ---
    op.create_table(
        "event_participants",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("event_participants")
    op.drop_index("ix_events_creator_id", table_name="events")
    op.drop_index("ix_events_interest_id", table_name="events")
    op.drop_table("events")
    op.drop_table("user_interests")
    op.drop_table("interests")
    op.drop_table("users")
