"""create_players_table

Revision ID: 3e8d1c5a7b20
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e8d1c5a7b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.String(length=100), nullable=False),
        sa.Column("player_name", sa.String(length=200), nullable=False),
        sa.Column("score", sa.BigInteger(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(op.f("ix_players_player_id"), "players", ["player_id"], unique=True)
    op.create_index(op.f("ix_players_score"), "players", ["score"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_players_score"), table_name="players")
    op.drop_index(op.f("ix_players_player_id"), table_name="players")
    op.drop_table("players")
