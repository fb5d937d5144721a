"""Create punpoints and info tables

Revision ID: 5c1e7a0b9d2f
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "5c1e7a0b9d2f"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "punpoints",
        sa.Column("user", sa.String(100), primary_key=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("given", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("points >= 0", name="ck_punpoints_points_nonneg"),
        sa.CheckConstraint("given >= 0", name="ck_punpoints_given_nonneg"),
        if_not_exists=True,
    )
    op.create_table(
        "info",
        sa.Column("name", sa.String(100), primary_key=True),
        sa.Column("val", sa.Text(), nullable=True),
        if_not_exists=True,
    )


def downgrade() -> None:
    op.drop_table("info")
    op.drop_table("punpoints")
