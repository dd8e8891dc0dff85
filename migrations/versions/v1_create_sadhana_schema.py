"""Create sadhana tracker schema

Revision ID: v1
Revises: 
Create Date: 2026-10-19 00:00:00

Users with goals and the sadhana streak, daily sadhana logs, books with
per-user reading progress and streaks, shloka challenges with verses.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'v1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="SADHAK"),
        sa.Column("timezone", sa.String(), nullable=False, server_default="Asia/Kolkata"),

        # Daily goals
        sa.Column("rounds_goal", sa.Integer(), nullable=False, server_default="16"),
        sa.Column("reading_goal", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("hearing_goal", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("aartis_goal", sa.Integer(), nullable=False, server_default="4"),

        # Sadhana streak
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("highest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_sadhana_date", sa.Date(), nullable=True),

        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("aartis_goal BETWEEN 0 AND 4", name="ck_users_aartis_goal"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_last_sadhana_date"), "users", ["last_sadhana_date"], unique=False)

    # Create sadhana_logs table
    op.create_table(
        "sadhana_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("chanting_rounds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lecture_duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_read", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("mangal_aarti", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("darshan_aarti", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("bhoga_aarti", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("gaura_aarti", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("wake_up_time", sa.DateTime(), nullable=True),
        sa.Column("sleep_time", sa.DateTime(), nullable=True),
        sa.Column("missed_note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_sadhana_logs_user_date"),
    )
    op.create_index(op.f("ix_sadhana_logs_user_id"), "sadhana_logs", ["user_id"], unique=False)

    # Create books table
    op.create_table(
        "books",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("author", sa.String(), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_books_id"), "books", ["id"], unique=False)
    op.create_index(op.f("ix_books_owner_id"), "books", ["owner_id"], unique=False)

    # Create user_book_progress table
    op.create_table(
        "user_book_progress",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("book_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False, server_default="PAGES"),
        sa.Column("total_units", sa.Integer(), nullable=False),
        sa.Column("current_value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("highest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_read_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["book_id"], ["books.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "book_id", name="uq_user_book_progress_user_book"),
    )
    op.create_index(op.f("ix_user_book_progress_id"), "user_book_progress", ["id"], unique=False)
    op.create_index(op.f("ix_user_book_progress_user_id"), "user_book_progress", ["user_id"], unique=False)
    op.create_index(op.f("ix_user_book_progress_book_id"), "user_book_progress", ["book_id"], unique=False)
    op.create_index(op.f("ix_user_book_progress_last_read_date"), "user_book_progress", ["last_read_date"], unique=False)

    # Create shloka_challenges table
    op.create_table(
        "shloka_challenges",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("highest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_learned_date", sa.Date(), nullable=True),
        sa.Column("last_activity_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shloka_challenges_id"), "shloka_challenges", ["id"], unique=False)
    op.create_index(op.f("ix_shloka_challenges_user_id"), "shloka_challenges", ["user_id"], unique=False)
    op.create_index(op.f("ix_shloka_challenges_last_learned_date"), "shloka_challenges", ["last_learned_date"], unique=False)

    # Create shlokas table
    op.create_table(
        "shlokas",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("challenge_id", sa.String(), nullable=False),
        sa.Column("reference", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("translation", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="NOT_STARTED"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["challenge_id"], ["shloka_challenges.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shlokas_id"), "shlokas", ["id"], unique=False)
    op.create_index(op.f("ix_shlokas_challenge_id"), "shlokas", ["challenge_id"], unique=False)


def downgrade() -> None:
    op.drop_table("shlokas")
    op.drop_table("shloka_challenges")
    op.drop_table("user_book_progress")
    op.drop_table("books")
    op.drop_table("sadhana_logs")
    op.drop_table("users")
