"""Initial schema — players, questions, game_sessions, game_results.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(20), nullable=False, unique=True),
        sa.Column("games_played", sa.Integer, nullable=False, server_default="0"),
        sa.Column("correct_answers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("high_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_players_username", "players", ["username"], unique=True)
    op.create_index("ix_players_high_score", "players", ["high_score"])

    op.create_table(
        "questions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("aramaic", sa.Text, nullable=False),
        sa.Column("hebrew", sa.Text, nullable=False),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("correct_answer", sa.Integer, nullable=False),
        sa.Column("audio_file", sa.String(255), nullable=True),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        sa.Column("difficulty", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("correct_answer BETWEEN 0 AND 3", name="ck_questions_correct_answer"),
    )
    op.create_index("ix_questions_category_difficulty", "questions", ["category", "difficulty"])
    op.create_index("ix_questions_is_active", "questions", ["is_active"])

    op.create_table(
        "game_sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), sa.ForeignKey("players.id"), nullable=False),
        sa.Column("score", sa.Integer, nullable=False, server_default="0"),
        sa.Column("lives", sa.Integer, nullable=False, server_default="3"),
        sa.Column("questions_answered", sa.JSON, nullable=False),
        sa.Column("correct_answers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("final_score", sa.Integer, nullable=True),
    )
    op.create_index("ix_game_sessions_owner_id", "game_sessions", ["owner_id"])
    op.create_index("ix_game_sessions_final_score", "game_sessions", ["final_score"])
    op.create_index(
        "uq_game_sessions_active_owner", "game_sessions", ["owner_id"],
        unique=True, postgresql_where=sa.text("status = 'active'"),
    )

    op.create_table(
        "game_results",
        sa.Column("session_id", UUID(as_uuid=True), sa.ForeignKey("game_sessions.id"), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), sa.ForeignKey("players.id"), nullable=False),
        sa.Column("correct_answers", sa.Integer, nullable=False),
        sa.Column("final_score", sa.Integer, nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_game_results_owner_id", "game_results", ["owner_id"])


def downgrade() -> None:
    op.drop_table("game_results")
    op.drop_table("game_sessions")
    op.drop_table("questions")
    op.drop_table("players")
