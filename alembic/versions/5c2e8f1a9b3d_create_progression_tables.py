"""create users, puzzles and user_progress

Revision ID: 5c2e8f1a9b3d
Revises:
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2e8f1a9b3d"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("subscription_tier", sa.String(20), nullable=False, server_default="free"),
        sa.Column("revenuecat_id", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "puzzles",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("image_key", sa.String(512), nullable=True),
        sa.Column("audio_url", sa.String(1024), nullable=True),
        sa.Column("spotify_playlist_url", sa.String(1024), nullable=True),
        sa.Column("grid_rows", sa.Integer(), nullable=False),
        sa.Column("grid_cols", sa.Integer(), nullable=False),
        sa.Column("level_order", sa.Integer(), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("grid_rows BETWEEN 2 AND 20", name="ck_puzzles_grid_rows"),
        sa.CheckConstraint("grid_cols BETWEEN 2 AND 20", name="ck_puzzles_grid_cols"),
        sa.CheckConstraint("level_order >= 1", name="ck_puzzles_level_order"),
    )
    op.create_index("ix_puzzles_active_order", "puzzles", ["is_active", "level_order"])

    op.create_table(
        "user_progress",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column(
            "puzzle_id", sa.Integer(), sa.ForeignKey("puzzles.id"), nullable=False, index=True
        ),
        sa.Column("placed_piece_ids", sa.JSON(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "puzzle_id", name="uq_user_progress_user_puzzle"),
    )
    op.create_index(
        "ix_user_progress_user_completed", "user_progress", ["user_id", "is_completed"]
    )
    op.create_index("ix_user_progress_user_created", "user_progress", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_user_progress_user_created", table_name="user_progress")
    op.drop_index("ix_user_progress_user_completed", table_name="user_progress")
    op.drop_table("user_progress")
    op.drop_index("ix_puzzles_active_order", table_name="puzzles")
    op.drop_table("puzzles")
    op.drop_table("users")
