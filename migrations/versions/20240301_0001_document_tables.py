"""document tables: users, habits, friends

Revision ID: 0001
Revises:
Create Date: 2024-03-01 12:00:00.000000+00:00

"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

document_json = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="Время создания документа",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="Время последнего обновления документа",
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("photo_url", sa.String(length=500), nullable=True),
        sa.Column("id", sa.String(length=64), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(op.f("ix_users_display_name"), "users", ["display_name"], unique=False)

    op.create_table(
        "habits",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "frequency",
            sa.Enum("daily", "weekly", "custom", name="habit_frequency_enum"),
            nullable=False,
        ),
        sa.Column("target", sa.Integer(), nullable=False),
        sa.Column("tags", document_json, nullable=False),
        sa.Column("color", sa.String(length=32), nullable=False),
        sa.Column("weekly_progress", document_json, nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("id", sa.String(length=64), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_habits")),
    )
    op.create_index(op.f("ix_habits_user_id"), "habits", ["user_id"], unique=False)
    op.create_index(op.f("ix_habits_order"), "habits", ["order"], unique=False)

    op.create_table(
        "friends",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("friend_id", sa.String(length=64), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "accepted", name="friend_status_enum"),
            nullable=False,
        ),
        sa.Column("id", sa.String(length=64), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_friends")),
        sa.UniqueConstraint("user_id", "friend_id", name="uq_friend_edge_pair"),
    )
    op.create_index(op.f("ix_friends_user_id"), "friends", ["user_id"], unique=False)
    op.create_index(op.f("ix_friends_friend_id"), "friends", ["friend_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_friends_friend_id"), table_name="friends")
    op.drop_index(op.f("ix_friends_user_id"), table_name="friends")
    op.drop_table("friends")

    op.drop_index(op.f("ix_habits_order"), table_name="habits")
    op.drop_index(op.f("ix_habits_user_id"), table_name="habits")
    op.drop_table("habits")

    op.drop_index(op.f("ix_users_display_name"), table_name="users")
    op.drop_table("users")

    sa.Enum(name="friend_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="habit_frequency_enum").drop(op.get_bind(), checkfirst=True)
