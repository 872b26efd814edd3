"""
Инициальная миграция.

Создаёт таблицу audio_sessions.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_audio_sessions"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "audio_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=True),
        sa.Column("transcript", sa.Text(), nullable=False),
        sa.Column("deepgram_calls", sa.Integer(), nullable=False),
        sa.Column("accumulated_size", sa.Integer(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("summary_type", sa.String(length=32), nullable=True),
        sa.Column("summary_language", sa.String(length=16), nullable=True),
        sa.Column("translation", sa.Text(), nullable=True),
        sa.Column("translation_language", sa.String(length=16), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_audio_sessions_session_id", "audio_sessions", ["session_id"], unique=True
    )
    op.create_index("ix_audio_sessions_user_id", "audio_sessions", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_audio_sessions_user_id", table_name="audio_sessions")
    op.drop_index("ix_audio_sessions_session_id", table_name="audio_sessions")
    op.drop_table("audio_sessions")
