"""Initial migration: create waitinglist and waitinglistentry tables

Revision ID: 001_initial
Revises:
Create Date: 2024-03-20 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # One waiting list per calendar date
    op.create_table(
        "waitinglist",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date", name="uq_waitinglist_date"),
    )

    # Entries; position is dense per list but not unique at the DB level
    op.create_table(
        "waitinglistentry",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("waiting_list_id", sa.Integer(), nullable=False),
        sa.Column("owner_name", sa.String(), nullable=True),
        sa.Column("puppy_name", sa.String(), nullable=True),
        sa.Column("service_required", sa.String(), nullable=False),
        sa.Column("arrival_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["waiting_list_id"],
            ["waitinglist.id"],
        ),
    )
    op.create_index("ix_waitinglistentry_waiting_list_id", "waitinglistentry", ["waiting_list_id"])
    op.create_index("ix_waitinglistentry_list_position", "waitinglistentry", ["waiting_list_id", "position"])


def downgrade() -> None:
    op.drop_index("ix_waitinglistentry_list_position", table_name="waitinglistentry")
    op.drop_index("ix_waitinglistentry_waiting_list_id", table_name="waitinglistentry")
    op.drop_table("waitinglistentry")
    op.drop_table("waitinglist")
